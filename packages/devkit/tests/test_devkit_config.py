from devkit.config import load_settings


def test_load_settings_reads_env(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://example")
    monkeypatch.setenv("WORKER_FRESHNESS_SECONDS", "120")
    monkeypatch.setenv("ENFORCE_STATUS_TRANSITIONS", "true")
    settings = load_settings("api")

    assert settings.SERVICE_NAME == "api"
    assert settings.DATABASE_URL == "postgresql://example"
    assert settings.WORKER_FRESHNESS_SECONDS == 120
    assert settings.ENFORCE_STATUS_TRANSITIONS is True


def test_load_settings_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("WORKER_FRESHNESS_SECONDS", raising=False)
    monkeypatch.delenv("ENFORCE_STATUS_TRANSITIONS", raising=False)
    settings = load_settings("api")

    assert settings.DATABASE_URL is None
    assert settings.WORKER_FRESHNESS_SECONDS == 300
    assert settings.MAX_PHOTO_COUNT == 3
    assert settings.MAX_PHOTO_BYTES == 5 * 1024 * 1024
    assert settings.ENFORCE_STATUS_TRANSITIONS is False
