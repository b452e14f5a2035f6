"""
Tests for configuration management.
"""
from pathlib import Path


def test_settings_loads_from_env(monkeypatch):
    """Test Settings class loads from CROPDOC_ prefixed env vars."""
    monkeypatch.setenv("CROPDOC_FAST_DELAY_MS", "10")
    monkeypatch.setenv("CROPDOC_CLOUD_DELAY_MS", "20")
    monkeypatch.setenv("CROPDOC_OFFLINE_MODE", "false")

    from cropdoctor.core import config
    config.get_settings.cache_clear()
    settings = config.get_settings()

    assert settings.FAST_DELAY_MS == 10
    assert settings.CLOUD_DELAY_MS == 20
    assert settings.OFFLINE_MODE is False


def test_settings_fallback_to_non_prefixed(monkeypatch):
    """Test Settings falls back to non-CROPDOC_ prefixed vars."""
    monkeypatch.delenv("CROPDOC_COMPARE_LIMIT", raising=False)
    monkeypatch.setenv("COMPARE_LIMIT", "5")

    from cropdoctor.core import config
    config.get_settings.cache_clear()
    settings = config.get_settings()

    assert settings.COMPARE_LIMIT == 5


def test_settings_defaults(monkeypatch):
    """Test Settings uses defaults when env vars not set."""
    for key in [
        "CROPDOC_FAST_DELAY_MS", "FAST_DELAY_MS",
        "CROPDOC_CLOUD_DELAY_MS", "CLOUD_DELAY_MS",
        "CROPDOC_OFFLINE_MODE", "OFFLINE_MODE",
        "CROPDOC_CATALOG_DIR", "CATALOG_DIR",
    ]:
        monkeypatch.delenv(key, raising=False)

    from cropdoctor.core import config
    config.get_settings.cache_clear()
    settings = config.get_settings()

    assert settings.FAST_DELAY_MS == 1500
    assert settings.CLOUD_DELAY_MS == 2500
    assert settings.OFFLINE_MODE is True
    assert Path(settings.CATALOG_DIR).name == "catalog"
    assert settings.COMPARE_LIMIT == 3


def test_latency_profiles():
    """Offline uses the fast profile, online the cloud profile."""
    from cropdoctor.services.diagnoser import CLOUD_PROFILE, FAST_PROFILE, latency_profile

    assert latency_profile(True)[0] == FAST_PROFILE == "fast-processing"
    assert latency_profile(False)[0] == CLOUD_PROFILE == "cloud-processing"


def test_runner_serves_app_with_configured_host_and_port(monkeypatch):
    """python -m cropdoctor hands the app to uvicorn."""
    monkeypatch.setenv("CROPDOC_HOST", "0.0.0.0")
    monkeypatch.setenv("CROPDOC_PORT", "9001")
    monkeypatch.setenv("CROPDOC_LOG_LEVEL", "INFO")

    from cropdoctor import __main__ as runner
    from cropdoctor.core import config
    config.get_settings.cache_clear()

    calls = []
    monkeypatch.setattr(runner.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    runner.main()

    assert calls == [("cropdoctor.main:app", {"host": "0.0.0.0", "port": 9001, "log_level": "info"})]
