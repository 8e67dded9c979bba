import pytest

import rai


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch):
    """main() flips the module-level trace flags; restore them after each test."""
    monkeypatch.setattr(rai, '_SHOULD_LOG_TOKENS', False)
    monkeypatch.setattr(rai, '_SHOULD_LOG_STACK', False)
