"""Tests for user rule files."""

from pathlib import Path

import pytest
from diffguard.models import Severity
from diffguard.rules import InvalidRule, load_rules_file
from diffguard.rules.loader import parse_rules


class TestParseRules:
  def test_valid_rule(self) -> None:
    rules = parse_rules({
      "rules": [{
        "id": "CUSTOM001",
        "section": "Remote",
        "pattern": r"wp_remote_get\s*\(",
        "message": "Remote request",
        "severity": "WARNING",
      }],
    })

    assert len(rules) == 1
    rule = rules[0]
    assert rule.id == "CUSTOM001"
    assert rule.section == "Remote"
    assert rule.severity == Severity.WARNING
    assert rule.matches("WP_REMOTE_GET( $url )")

  def test_section_defaults(self) -> None:
    rules = parse_rules({
      "rules": [{"id": "C1", "pattern": "x", "message": "m", "severity": "info"}],
    })

    assert rules[0].section == "Custom Rules"

  def test_empty_document(self) -> None:
    assert parse_rules(None) == []

  def test_not_a_mapping(self) -> None:
    with pytest.raises(InvalidRule, match="'rules' list"):
      parse_rules(["a"])

  def test_unknown_severity(self) -> None:
    with pytest.raises(InvalidRule, match="rule #1"):
      parse_rules({
        "rules": [{"id": "C1", "pattern": "x", "message": "m", "severity": "urgent"}],
      })

  def test_unknown_field(self) -> None:
    with pytest.raises(InvalidRule):
      parse_rules({
        "rules": [{"id": "C1", "pattern": "x", "message": "m", "severity": "info", "flags": "i"}],
      })

  def test_bad_pattern(self) -> None:
    with pytest.raises(InvalidRule):
      parse_rules({
        "rules": [{"id": "C1", "pattern": "(unclosed", "message": "m", "severity": "info"}],
      })


class TestLoadRulesFile:
  def test_loads_yaml(self, tmp_path: Path) -> None:
    path = tmp_path / "rules.yaml"
    path.write_text(
      "rules:\n"
      "  - id: C1\n"
      "    pattern: 'update_option\\s*\\('\n"
      "    message: Option write\n"
      "    severity: review\n"
    )

    rules = load_rules_file(path)

    assert [r.id for r in rules] == ["C1"]
    assert rules[0].severity == Severity.REVIEW

  def test_missing_file(self, tmp_path: Path) -> None:
    with pytest.raises(InvalidRule, match="Cannot read"):
      load_rules_file(tmp_path / "missing.yaml")

  def test_invalid_yaml(self, tmp_path: Path) -> None:
    path = tmp_path / "rules.yaml"
    path.write_text("rules: [\n")

    with pytest.raises(InvalidRule, match="not valid YAML"):
      load_rules_file(path)
