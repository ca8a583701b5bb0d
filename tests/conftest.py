# tests/conftest.py
import os
import sys

import pytest

# path to the repo root (one level up from tests/)
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# ensure repo root is importable so `import musicontrol.*` works
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

# never probe real players when a test imports the Flask app
os.environ.setdefault("MUSICONTROL_SKIP_STARTUP", "1")


class CommandTable:
    """
    Stand-in for executor.execute: answers by substring match on the command
    line and records every command it was asked to run.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def __call__(self, command_line, interpreter=None, timeout=None):
        self.calls.append(command_line)
        for needle, reply in self.responses.items():
            if needle in command_line:
                return reply
        return ""

    def ran(self, needle):
        return [c for c in self.calls if needle in c]


@pytest.fixture
def commands(mocker):
    """Patch the executor so backends talk to a CommandTable instead of a shell."""
    table = CommandTable()
    mocker.patch("musicontrol.executor.execute", side_effect=table)
    return table
