"""Rule catalogue and evaluation engine."""

from diffguard.rules.aggregate import aggregate, overall_status
from diffguard.rules.base import Finding, InvalidRule, Rule, SkippedRule
from diffguard.rules.catalogue import RuleCatalogue, builtin_catalogue
from diffguard.rules.engine import Evaluation, RuleEngine
from diffguard.rules.loader import load_rules_file

__all__ = [
  "Evaluation",
  "Finding",
  "InvalidRule",
  "Rule",
  "RuleCatalogue",
  "RuleEngine",
  "SkippedRule",
  "aggregate",
  "builtin_catalogue",
  "load_rules_file",
  "overall_status",
]
