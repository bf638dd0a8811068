# tests/conftest.py
import os
import tempfile

import pytest

# point the app at throwaway storage before anything reads config
_TMP = tempfile.mkdtemp(prefix="propmatch-tests-")
os.environ.setdefault("PROPMATCH_DB_URI", f"sqlite:///{_TMP}/test.db")
os.environ.setdefault("PROPMATCH_PREFERENCES_PATH", f"{_TMP}/preferences.json")

from fastapi.testclient import TestClient  # noqa: E402

from propmatch.api.http import app  # noqa: E402
from propmatch.domain.property import Property, PropertyConfiguration  # noqa: E402


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def make_property():
    def _make(pid: str, **overrides) -> Property:
        data = dict(
            id=pid,
            name=f"Project {pid}",
            type="apartment",
            zone="south",
            zone_id="z2",
            area="Koramangala",
            developer="Acme Builders",
            status="active",
            tags=[],
        )
        data.update(overrides)
        return Property(**data)

    return _make


@pytest.fixture
def make_config():
    def _make(pid: str, rate, area=1000, label="2BHK", cid: str | None = None) -> PropertyConfiguration:
        return PropertyConfiguration(
            id=cid or f"{pid}-{label}-{rate}",
            property_id=pid,
            configuration=label,
            price_per_sqft=rate,
            built_up_area=area,
        )

    return _make
