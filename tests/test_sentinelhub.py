"""Tests for the Sentinel Hub client using a stubbed requests session."""

# pylint: disable=missing-function-docstring,redefined-outer-name

from datetime import date

import pytest
import requests

from palmcarbon.core.config import ConfigManager, ConfigValidationError
from palmcarbon.core.errors import SatelliteDataError
from palmcarbon.satellite.sentinelhub import BoundingBox, SentinelHubClient


@pytest.fixture
def client(fake_session, seeded_rng):
    return SentinelHubClient(
        "test-key",
        base_url="https://sh.example.com/",
        session=fake_session,
        rng=seeded_rng,
        max_retries=2,
    )


def test_bounding_box_around_point():
    bbox = BoundingBox.around(24.0, 46.0)
    assert bbox.west == pytest.approx(45.991)
    assert bbox.north == pytest.approx(24.009)
    assert bbox.as_param().count(",") == 3


def test_requires_api_key():
    with pytest.raises(ConfigValidationError):
        SentinelHubClient("")


def test_from_config_reads_env(monkeypatch, fake_session):
    monkeypatch.setenv("SENTINEL_HUB_API_KEY", "env-key")
    c = SentinelHubClient.from_config(ConfigManager(), session=fake_session)
    assert c.api_key == "env-key"
    assert c.base_url == ConfigManager.DEFAULT_SENTINEL_HUB_URL


def test_from_config_without_key(monkeypatch):
    monkeypatch.delenv("SENTINEL_HUB_API_KEY", raising=False)
    with pytest.raises(ConfigValidationError):
        SentinelHubClient.from_config(ConfigManager())


def test_fetch_satellite_data_builds_images(client, fake_session):
    images = client.fetch_satellite_data(24.0, 46.0, "2024-01-01", "2024-03-01", 30)

    _, kwargs = fake_session.get.call_args
    args = fake_session.get.call_args[0]
    assert args[0] == "https://sh.example.com/api/v1/catalog/search"
    assert kwargs["headers"] == {"Authorization": "Bearer test-key"}
    assert kwargs["params"]["collections"] == "sentinel-2-l2a"
    assert kwargs["params"]["eo:cloud_cover"] == "[0,30]"
    assert kwargs["params"]["datetime"] == "2024-01-01T00:00:00Z/2024-03-01T23:59:59Z"

    assert [img.id for img in images] == ["S2A_20240110", "S2B_20240125", "S2A_20240205"]
    first = images[0]
    assert first.date == "2024-01-10"
    assert first.cloud_cover == 12.0
    assert first.source == "Sentinel-2 L2A"
    assert first.metadata["tile_id"] == "T38RLN"
    assert images[1].metadata["datastrip"] == "N/A"
    assert "time=2024-01-10" in first.url
    for img in images:
        assert 0.55 <= img.ndvi <= 0.80
        assert 0.35 <= img.evi <= 0.60
        assert -0.15 <= img.ndbi <= -0.05
        assert 0.35 <= img.ndmi <= 0.55


def test_fetch_uses_scene_means_when_bands_present(
    client, fake_session, make_response
):
    feature = {
        "id": "S2A_PROC",
        "properties": {"datetime": "2024-03-01T08:00:00Z", "eo:cloud_cover": 5},
        "bands": {
            "b4": [[0.2, 0.2], [0.2, 0.2]],
            "b8": [[0.6, 0.6], [0.6, 0.2]],
            "b11": [[0.2, 0.2], [0.2, 0.2]],
        },
    }
    fake_session.get.return_value = make_response(200, {"features": [feature]})
    (img,) = client.fetch_satellite_data(0, 0, "2024-03-01", "2024-03-02")
    assert img.ndvi == pytest.approx(0.375)
    assert img.ndmi == pytest.approx(0.375)
    assert img.ndbi == pytest.approx(-0.375)
    assert img.evi == 0.0


def test_fetch_fills_missing_cloud_cover(client, fake_session, make_response):
    fake_session.get.return_value = make_response(
        200, {"features": [{"properties": {"datetime": "2024-01-01T00:00:00Z"}}]}
    )
    (img,) = client.fetch_satellite_data(0, 0, "2024-01-01", "2024-01-31")
    assert 0 <= img.cloud_cover <= 15
    assert img.id.startswith("sentinel-")


def test_fetch_retries_then_succeeds(client, fake_session, make_response, catalog_payload):
    fake_session.get.side_effect = [
        requests.ConnectionError("reset"),
        make_response(200, catalog_payload),
    ]
    images = client.fetch_satellite_data(0, 0, "2024-01-01", "2024-01-31")
    assert len(images) == 3
    assert fake_session.get.call_count == 2


def test_fetch_raises_after_retries(client, fake_session, make_response):
    fake_session.get.return_value = make_response(503)
    with pytest.raises(SatelliteDataError):
        client.fetch_satellite_data(0, 0, "2024-01-01", "2024-01-31")
    assert fake_session.get.call_count == 2


def test_validate_credentials(client, fake_session, make_response):
    fake_session.get.return_value = make_response(200)
    assert client.validate_credentials() is True
    fake_session.get.return_value = make_response(401)
    assert client.validate_credentials() is False
    fake_session.get.side_effect = requests.Timeout("slow")
    assert client.validate_credentials() is False


def test_get_latest_image_picks_least_cloudy(client, fake_session):
    img = client.get_latest_image(24.0, 46.0, today=date(2024, 2, 10))
    assert img.id == "S2B_20240125"
    params = fake_session.get.call_args[1]["params"]
    assert params["datetime"].startswith("2024-01-11T")


def test_get_latest_image_none_on_failure(client, fake_session, make_response):
    fake_session.get.return_value = make_response(500)
    assert client.get_latest_image(0, 0) is None
    fake_session.get.return_value = make_response(200, {"features": []})
    assert client.get_latest_image(0, 0) is None


def test_get_historical_data(client, fake_session, make_response):
    images = client.get_historical_data(24.0, 46.0, months=2, today=date(2024, 3, 1))
    params = fake_session.get.call_args[1]["params"]
    assert params["datetime"].startswith("2024-01-01T")
    assert params["eo:cloud_cover"] == "[0,30]"
    assert len(images) == 3

    fake_session.get.return_value = make_response(500)
    assert client.get_historical_data(0, 0) == []
