# pylint: disable=missing-module-docstring,missing-function-docstring,redefined-outer-name
from unittest.mock import MagicMock

import numpy as np
import pytest
import requests

from palmcarbon.carbon.model import FarmData
from palmcarbon.indices.vegetation import SentinelBands


@pytest.fixture
def reference_farm():
    """50 ha of 8-year-old drip-irrigated date palms on loamy soil."""
    return FarmData(
        area_hectares=50,
        tree_count=2500,
        average_tree_age=8,
        tree_species="date_palm",
        soil_type="loamy",
        irrigation_type="drip",
    )


@pytest.fixture
def full_bands():
    """Typical healthy palm canopy reflectances for every band."""
    return SentinelBands(
        B2=0.12,
        B3=0.15,
        B4=0.22,
        B5=0.25,
        B6=0.30,
        B7=0.34,
        B8=0.42,
        B8A=0.40,
        B11=0.28,
        B12=0.20,
    )


def _response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else {}
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def make_response():
    return _response


@pytest.fixture
def catalog_payload():
    return {
        "features": [
            {
                "id": "S2A_20240110",
                "properties": {
                    "datetime": "2024-01-10T08:15:00Z",
                    "eo:cloud_cover": 12.0,
                    "sentinel:product_id": "T38RLN",
                    "sentinel:datastrip_id": "DS_20240110",
                },
            },
            {
                "id": "S2B_20240125",
                "properties": {
                    "datetime": "2024-01-25T08:15:00Z",
                    "eo:cloud_cover": 3.5,
                },
            },
            {
                "id": "S2A_20240205",
                "properties": {
                    "datetime": "2024-02-05T08:15:00Z",
                    "eo:cloud_cover": 27.0,
                },
            },
        ]
    }


@pytest.fixture
def fake_session(make_response, catalog_payload):
    session = MagicMock(spec=requests.Session)
    session.get.return_value = make_response(200, catalog_payload)
    return session


@pytest.fixture
def seeded_rng():
    return np.random.default_rng(42)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda _: None)
