"""The ordered catalogue of detection rules.

Catalogue order is report order: findings are always listed in the order
rules appear here, regardless of severity or which rule fired first.
Sections only group rules for reporting and have no effect on evaluation.
Overlapping patterns are intentional; every rule runs and counts on its own.
"""

from typing import Iterable, Iterator, Sequence

from diffguard.models import Severity
from diffguard.rules.base import InvalidRule, Rule

CRITICAL = Severity.CRITICAL
WARNING = Severity.WARNING
REVIEW = Severity.REVIEW
INFO = Severity.INFO

# (section, [(id, pattern, message, severity), ...])
_BUILTIN_TABLE: Sequence[tuple[str, Sequence[tuple[str, str, str, Severity]]]] = (
  ("SQL Injection", (
    ("SQL001", r"\$wpdb->query.*\$_",
     "Direct query with user input (use $wpdb->prepare())", CRITICAL),
    ("SQL002", r"\$wpdb->(?:query|get_var|get_row|get_col|get_results)\s*\(.*\$",
     "Raw query containing a variable - verify it is escaped or prepared", WARNING),
    ("SQL003", r"\$wpdb->get_",
     "Database query - verify $wpdb->prepare() is used", WARNING),
    ("SQL004", r"esc_sql",
     "esc_sql found - prefer $wpdb->prepare()", WARNING),
  )),
  ("Cross-Site Scripting (XSS)", (
    ("XSS001", r"echo.*\$_(?:GET|POST|REQUEST)",
     "Echoing user input without escaping", CRITICAL),
    ("XSS002", r"print.*\$_(?:GET|POST|REQUEST)",
     "Printing user input without escaping", CRITICAL),
    ("XSS003", r"<\?=.*\$",
     "Short echo tag with variable - ensure proper escaping", WARNING),
  )),
  ("Output Escaping", (
    ("ESC001", r"echo.*\$(?!_(?:GET|POST|REQUEST)\b)",
     "Echo with variable - verify esc_html/esc_attr is used", REVIEW),
  )),
  ("CSRF Protection", (
    ("CSRF001", r"admin_post_",
     "Admin POST handler - verify wp_nonce check exists", REVIEW),
    ("CSRF002", r"wp_ajax_",
     "AJAX handler - verify wp_nonce check exists", REVIEW),
    ("CSRF003", r"\$_POST\[",
     "POST data usage - verify nonce verification", REVIEW),
  )),
  ("Dangerous Functions", (
    ("FUNC001", r"eval\s*\(",
     "eval() usage detected - HIGH RISK", CRITICAL),
    ("FUNC002", r"(?:^|[^.])exec\s*\(",
     "PHP exec() usage detected - HIGH RISK", CRITICAL),
    ("FUNC003", r"child_process",
     "child_process module - potential command execution", CRITICAL),
    ("FUNC004", r"require.*child_process|from.*child_process",
     "child_process import detected - HIGH RISK", CRITICAL),
    ("FUNC005", r"execSync|spawnSync",
     "Synchronous command execution detected", CRITICAL),
    ("FUNC006", r"system\s*\(",
     "system() usage detected - HIGH RISK", CRITICAL),
    ("FUNC007", r"shell_exec",
     "shell_exec() usage detected - HIGH RISK", CRITICAL),
    ("FUNC008", r"passthru",
     "passthru() usage detected - HIGH RISK", CRITICAL),
    ("FUNC009", r"popen\s*\(",
     "popen() usage detected - HIGH RISK", CRITICAL),
    ("FUNC010", r"proc_open",
     "proc_open() usage detected - HIGH RISK", CRITICAL),
    ("FUNC011", r"unserialize",
     "unserialize() - use maybe_unserialize() or validate input", CRITICAL),
    ("FUNC012", r"base64_decode",
     "base64_decode() - verify source is trusted", WARNING),
    ("FUNC013", r"new Function\s*\(",
     "new Function() - similar to eval, HIGH RISK", CRITICAL),
    ("FUNC014", r"setTimeout.*\$|setInterval.*\$",
     "setTimeout/setInterval with string - potential code execution", WARNING),
  )),
  ("File Operations", (
    ("FILE001", r"file_get_contents.*\$",
     "file_get_contents with variable - verify path", WARNING),
    ("FILE002", r"file_put_contents",
     "file_put_contents - verify write permissions & path", WARNING),
    ("FILE003", r"fopen.*\$",
     "fopen with variable - verify path is safe", WARNING),
    ("FILE004", r"include.*\$",
     "Dynamic include - potential LFI vulnerability", CRITICAL),
    ("FILE005", r"require.*\$",
     "Dynamic require - potential LFI vulnerability", CRITICAL),
    ("FILE006", r"move_uploaded_file",
     "File upload handling - verify proper validation", WARNING),
  )),
  ("Input Sanitization", (
    ("INPUT001", r"\$_GET\[",
     "$_GET usage - verify sanitize_text_field/intval", REVIEW),
    ("INPUT002", r"\$_POST\[",
     "$_POST usage - verify sanitization", REVIEW),
    ("INPUT003", r"\$_REQUEST\[",
     "$_REQUEST usage - verify sanitization", REVIEW),
    ("INPUT004", r"\$_COOKIE\[",
     "$_COOKIE usage - verify sanitization", REVIEW),
    ("INPUT005", r"\$_SERVER\[",
     "$_SERVER usage - some values need sanitization", REVIEW),
  )),
  ("WordPress Best Practices", (
    ("WP001", r"ABSPATH",
     "ABSPATH check found (good practice)", INFO),
    ("WP002", r"current_user_can",
     "Capability check found (good practice)", INFO),
    ("WP003", r"wp_verify_nonce",
     "Nonce verification found (good practice)", INFO),
    ("WP004", r"sanitize_",
     "Sanitization function found (good practice)", INFO),
    ("WP005", r"esc_html|esc_attr|esc_url|wp_kses",
     "Escaping function found (good practice)", INFO),
  )),
)


class RuleCatalogue:
  """An ordered, immutable sequence of rules with unique ids.

  Example:
    catalogue = builtin_catalogue().without(["WP004"])
    for section, rules in catalogue.by_section().items():
      ...
  """

  def __init__(self, rules: Iterable[Rule]):
    self._rules: tuple[Rule, ...] = tuple(rules)
    self._index: dict[str, Rule] = {}
    for rule in self._rules:
      if not isinstance(rule, Rule):
        raise InvalidRule(f"Catalogue entries must be Rule instances, got {rule!r}")
      if rule.id in self._index:
        raise InvalidRule(f"Duplicate rule id: {rule.id}")
      self._index[rule.id] = rule

  def __iter__(self) -> Iterator[Rule]:
    return iter(self._rules)

  def __len__(self) -> int:
    return len(self._rules)

  def __contains__(self, rule_id: object) -> bool:
    return rule_id in self._index

  @property
  def rules(self) -> tuple[Rule, ...]:
    return self._rules

  def get(self, rule_id: str) -> Rule | None:
    return self._index.get(rule_id)

  def sections(self) -> list[str]:
    """Section names in first-appearance order."""
    return list(dict.fromkeys(rule.section for rule in self._rules))

  def by_section(self) -> dict[str, list[Rule]]:
    grouped: dict[str, list[Rule]] = {}
    for rule in self._rules:
      grouped.setdefault(rule.section, []).append(rule)
    return grouped

  def position(self, rule_id: str) -> int:
    """Catalogue position of a rule, used to keep report order stable."""
    for i, rule in enumerate(self._rules):
      if rule.id == rule_id:
        return i
    raise KeyError(rule_id)

  def extend(self, rules: Iterable[Rule]) -> "RuleCatalogue":
    """Return a new catalogue with rules appended after the current ones."""
    return RuleCatalogue([*self._rules, *rules])

  def without(self, rule_ids: Iterable[str]) -> "RuleCatalogue":
    """Return a new catalogue without the given rule ids.

    Raises:
      InvalidRule: If an id is not in the catalogue.
    """
    drop = set(rule_ids)
    unknown = sorted(drop - self._index.keys())
    if unknown:
      raise InvalidRule(f"Cannot disable unknown rule(s): {', '.join(unknown)}")
    return RuleCatalogue(rule for rule in self._rules if rule.id not in drop)


def _build_builtin() -> RuleCatalogue:
  return RuleCatalogue(
    Rule(id=rule_id, section=section, pattern=pattern, message=message, severity=severity)
    for section, entries in _BUILTIN_TABLE
    for rule_id, pattern, message, severity in entries
  )


_BUILTIN = _build_builtin()


def builtin_catalogue() -> RuleCatalogue:
  """The process-wide built-in catalogue, built once at import."""
  return _BUILTIN
