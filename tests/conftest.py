"""Pytest fixtures."""

import pytest
from diffguard.diff.corpus import Corpus
from diffguard.models import ChangedPath, ChangeKind, CorpusLine, Severity
from diffguard.rules.base import Rule
from diffguard.rules.catalogue import RuleCatalogue


def make_corpus(*texts: str) -> Corpus:
  return Corpus(lines=tuple(
    CorpusLine(number=i, text=text) for i, text in enumerate(texts, start=1)
  ))


@pytest.fixture
def sample_diff() -> str:
  return """diff --git a/plugin/admin.php b/plugin/admin.php
index 1234567..abcdefg 100644
--- a/plugin/admin.php
+++ b/plugin/admin.php
@@ -1,3 +1,4 @@
 <?php
-$old = 1;
+echo $_GET['name'];
+$id = intval( $_POST['id'] );
 defined( 'ABSPATH' ) || exit;
diff --git a/plugin/new.js b/plugin/new.js
new file mode 100644
index 0000000..1234567
--- /dev/null
+++ b/plugin/new.js
@@ -0,0 +1,2 @@
+const cp = require('child_process');
+cp.execSync(cmd);
"""


@pytest.fixture
def sample_changed() -> list[ChangedPath]:
  return [
    ChangedPath(path="plugin/admin.php", kind=ChangeKind.MODIFIED),
    ChangedPath(path="plugin/new.js", kind=ChangeKind.ADDED),
    ChangedPath(path="plugin/vendor/lib.php", kind=ChangeKind.MODIFIED),
    ChangedPath(path="plugin/old.php", kind=ChangeKind.DELETED),
  ]


@pytest.fixture
def small_catalogue() -> RuleCatalogue:
  return RuleCatalogue([
    Rule(id="T001", section="First", pattern=r"eval\s*\(", message="eval", severity=Severity.CRITICAL),
    Rule(id="T002", section="First", pattern=r"base64_decode", message="b64", severity=Severity.WARNING),
    Rule(id="T003", section="Second", pattern=r"\$_GET\[", message="get", severity=Severity.REVIEW),
    Rule(id="T004", section="Second", pattern=r"ABSPATH", message="abspath", severity=Severity.INFO),
  ])
