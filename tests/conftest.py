import os
import tempfile

import pytest

# must be set before phishshield.api is imported, it builds its store at import
os.environ.setdefault("PHISHSHIELD_DB", os.path.join(tempfile.mkdtemp(), "phishshield_test.db"))
os.environ.setdefault("PHISHSHIELD_SCAN_DELAY", "0")

from phishshield.db import CounterStore


@pytest.fixture
def store(tmp_path):
    s = CounterStore(f"sqlite:///{tmp_path / 'counters.db'}")
    yield s
    s.dispose()


@pytest.fixture
def client(store, monkeypatch):
    from phishshield import api
    monkeypatch.setattr(api, "store", store)
    monkeypatch.setattr(api, "API_KEY", None)
    monkeypatch.setattr(api.limiter, "enabled", False)
    api.app.config['TESTING'] = True
    with api.app.test_client() as c:
        yield c
