"""Rule engine that evaluates the catalogue against the corpus."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Sequence

from diffguard.diff.corpus import Corpus
from diffguard.models import CorpusLine
from diffguard.rules.base import Finding, Rule, SkippedRule

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXAMPLES = 10


@dataclass(frozen=True)
class Evaluation:
  """Findings in catalogue order, plus any rules that failed to run."""

  findings: Sequence[Finding]
  skipped: Sequence[SkippedRule] = ()


class RuleEngine:
  """Evaluates every rule against every corpus line.

  There is no early termination and no deduplication: a line may appear in
  any number of findings. Each rule only reads the immutable corpus, so
  with workers > 1 rules are fanned out to a thread pool and joined back
  in catalogue order.

  Example:
    engine = RuleEngine(workers=4)
    evaluation = engine.evaluate(build_corpus(diff_text), builtin_catalogue())
  """

  def __init__(self, max_examples: int = DEFAULT_MAX_EXAMPLES, workers: int = 1):
    """Initialize the rule engine.

    Args:
      max_examples: Matching lines kept per finding for display.
      workers: Threads used for evaluation; 1 evaluates sequentially.
    """
    if max_examples < 1:
      raise ValueError("max_examples must be at least 1")
    if workers < 1:
      raise ValueError("workers must be at least 1")
    self.max_examples = max_examples
    self.workers = workers

  def evaluate(self, corpus: Corpus, catalogue: Iterable[Rule]) -> Evaluation:
    """Evaluate all rules and collect findings in catalogue order."""
    rules = list(catalogue)

    if self.workers > 1 and len(rules) > 1:
      with ThreadPoolExecutor(
        max_workers=self.workers, thread_name_prefix="diffguard-rule",
      ) as executor:
        outcomes = list(executor.map(lambda rule: self._evaluate_safely(rule, corpus), rules))
    else:
      outcomes = [self._evaluate_safely(rule, corpus) for rule in rules]

    findings: list[Finding] = []
    skipped: list[SkippedRule] = []
    for outcome in outcomes:
      if isinstance(outcome, Finding):
        findings.append(outcome)
      elif isinstance(outcome, SkippedRule):
        skipped.append(outcome)

    logger.info(
      "Evaluated %d rule(s) against %d line(s): %d finding(s), %d skipped",
      len(rules), len(corpus), len(findings), len(skipped),
    )
    return Evaluation(findings=tuple(findings), skipped=tuple(skipped))

  def evaluate_rule(self, rule: Rule, corpus: Corpus) -> Finding | None:
    """Evaluate a single rule; None when it matches nothing."""
    shown: list[CorpusLine] = []
    count = 0
    for line in corpus:
      if rule.matches(line.text):
        count += 1
        if len(shown) < self.max_examples:
          shown.append(line)

    if count == 0:
      return None
    return Finding(rule=rule, matched_lines=tuple(shown), match_count=count)

  def _evaluate_safely(self, rule: Rule, corpus: Corpus) -> Finding | SkippedRule | None:
    # One failing rule must not cost the rest of the catalogue
    try:
      return self.evaluate_rule(rule, corpus)
    except Exception as e:
      logger.warning("Skipping rule %s: evaluation failed: %s", rule.id, e)
      return SkippedRule(rule=rule, reason=f"{type(e).__name__}: {e}")
