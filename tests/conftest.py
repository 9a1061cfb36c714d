"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides the shared fixtures for building fake Codeception projects.
"""

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local ceptplane package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of ceptplane modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("ceptplane"):
        del sys.modules[module_name]

from ceptplane.testing.models import TestNode  # noqa: E402


class RecordingSink:
    """TestSink that records every event in order."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []
        self.failures: dict[str, str] = {}
        self.output: list[str] = []
        self.end_runs = 0

    def node_added(self, node: TestNode) -> None:
        self.events.append(("added", node.id))

    def node_removed(self, node: TestNode) -> None:
        self.events.append(("removed", node.id))

    def started(self, node: TestNode) -> None:
        self.events.append(("started", node.id))

    def passed(self, node: TestNode) -> None:
        self.events.append(("passed", node.id))

    def failed(self, node: TestNode, message: str) -> None:
        self.events.append(("failed", node.id))
        self.failures[node.id] = message

    def skipped(self, node: TestNode) -> None:
        self.events.append(("skipped", node.id))

    def append_output(self, text: str) -> None:
        self.output.append(text)

    def end_run(self) -> None:
        self.end_runs += 1

    def ids(self, event: str) -> list[str]:
        return [node_id for name, node_id in self.events if name == event]

    def last_state(self, node_id: str) -> str | None:
        for name, nid in reversed(self.events):
            if nid == node_id and name in ("started", "passed", "failed", "skipped"):
                return name
        return None

    @property
    def text(self) -> str:
        return "".join(self.output)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


UNIT_TEST_SOURCE = """<?php

class LoginTest extends \\Codeception\\Test\\Unit
{
    public function testValidLogin()
    {
        $this->assertTrue(true);
    }

    public function testInvalidLogin()
    {
        $this->assertFalse(false);
    }

    protected function helperNotATest()
    {
    }
}
"""

CEST_SOURCE = """<?php

class SignupCest
{
    public function __construct()
    {
    }

    public function signUp(AcceptanceTester $I)
    {
        $I->amOnPage('/signup');
    }

    private function fillForm(AcceptanceTester $I)
    {
    }
}
"""

ProjectFactory = Callable[..., Path]


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Build a fake Codeception project.

    ``suites`` maps suite name to ``{file name: source}``. Every suite gets
    a ``<name>.suite.yml``; pass ``None`` as the files mapping to create the
    definition without a suite directory.
    """

    def _make(
        name: str = "app",
        suites: dict[str, dict[str, str] | None] | None = None,
        codeception_yml: str | None = None,
    ) -> Path:
        root = tmp_path / name
        tests_dir = root / "tests"
        tests_dir.mkdir(parents=True)
        if suites is None:
            suites = {
                "unit": {"LoginTest.php": UNIT_TEST_SOURCE},
                "acceptance": {"SignupCest.php": CEST_SOURCE},
            }
        for suite, files in suites.items():
            (tests_dir / f"{suite}.suite.yml").write_text("actor: Tester\n")
            if files is None:
                continue
            suite_dir = tests_dir / suite
            suite_dir.mkdir()
            for filename, source in files.items():
                (suite_dir / filename).write_text(source)
        if codeception_yml is not None:
            (root / "codeception.yml").write_text(codeception_yml)
        return root

    return _make


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global config and CEPTPLANE__ env vars out of tests."""
    monkeypatch.setattr(
        "ceptplane.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global-config.yaml"
    )
    for key in list(os.environ):
        if key.upper().startswith("CEPTPLANE__"):
            monkeypatch.delenv(key)
