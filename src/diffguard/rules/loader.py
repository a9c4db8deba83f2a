"""Loading additional rules from YAML files."""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from diffguard.models import Severity
from diffguard.rules.base import InvalidRule, Rule

DEFAULT_SECTION = "Custom Rules"


class RuleSpec(BaseModel):
  """One entry of a rules file."""

  model_config = ConfigDict(extra="forbid")

  id: str
  section: str = DEFAULT_SECTION
  pattern: str
  message: str
  severity: Severity

  @field_validator("severity", mode="before")
  @classmethod
  def _lower_severity(cls, value: object) -> object:
    if isinstance(value, str):
      return value.strip().lower()
    return value

  def to_rule(self) -> Rule:
    return Rule(
      id=self.id,
      section=self.section,
      pattern=self.pattern,
      message=self.message,
      severity=self.severity,
    )


def parse_rules(data: object, source: str = "<rules>") -> list[Rule]:
  """Parse a loaded rules document into Rule objects.

  The document must be a mapping with a top-level 'rules' list.

  Raises:
    InvalidRule: If the document or any entry is malformed.
  """
  if data is None:
    return []
  if not isinstance(data, dict) or not isinstance(data.get("rules", []), list):
    raise InvalidRule(f"{source}: expected a mapping with a 'rules' list")

  rules: list[Rule] = []
  for i, entry in enumerate(data.get("rules", [])):
    try:
      spec = RuleSpec.model_validate(entry)
    except ValidationError as e:
      raise InvalidRule(f"{source}: rule #{i + 1} is invalid: {e}") from e
    rules.append(spec.to_rule())
  return rules


def load_rules_file(path: Path) -> list[Rule]:
  """Load rules from a YAML file.

  Raises:
    InvalidRule: If the file is missing, not valid YAML, or has a bad rule.
  """
  try:
    with open(path) as f:
      data = yaml.safe_load(f)
  except OSError as e:
    raise InvalidRule(f"Cannot read rules file {path}: {e}") from e
  except yaml.YAMLError as e:
    raise InvalidRule(f"Rules file {path} is not valid YAML: {e}") from e

  return parse_rules(data, source=str(path))
