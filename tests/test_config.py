import pytest

from binroute.config import Settings


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BINROUTE_OSRM_BASE_URL", "http://localhost:5000/")
    monkeypatch.setenv("BINROUTE_OSRM_MAX_PARALLEL_REQUESTS", "1")
    monkeypatch.setenv("BINROUTE_FRONTEND_ALLOWED_ORIGINS", "http://a.test, http://b.test")

    settings = Settings()

    assert settings.osrm_base_url == "http://localhost:5000"
    assert settings.osrm_max_parallel_requests == 1
    assert settings.frontend_allowed_origins == ("http://a.test", "http://b.test")


def test_settings_parse_json_origins(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BINROUTE_FRONTEND_ALLOWED_ORIGINS", '["http://a.test"]')

    assert Settings().frontend_allowed_origins == ("http://a.test",)


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.collection_status == "red"
    assert settings.osrm_profile == "driving"
    assert settings.osrm_timeout_seconds > 0
