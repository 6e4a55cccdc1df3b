"""Global test fixtures - isolate tests from the operator's environment."""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from tracker.config import ENV_VARS  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove tracker settings an operator may have exported."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    yield

