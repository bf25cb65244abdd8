from bridge_aggregator.config import Settings


def test_bungee_api_key_alias(monkeypatch):
    """Bungee API key should load from the legacy Socket variable when present."""

    monkeypatch.delenv("BUNGEE_API_KEY", raising=False)
    monkeypatch.setenv("SOCKET_API_KEY", "alias-from-legacy")

    settings = Settings()

    assert settings.bungee_api_key == "alias-from-legacy"
    assert settings.has_bungee_key


def test_bungee_api_key_direct_env(monkeypatch):
    """Environment-provided Bungee API key remains the primary source."""

    monkeypatch.setenv("BUNGEE_API_KEY", "primary-key")
    monkeypatch.setenv("SOCKET_API_KEY", "alias-from-legacy")

    settings = Settings()

    assert settings.bungee_api_key == "primary-key"


def test_provider_toggles_from_env(monkeypatch):
    monkeypatch.setenv("ENABLE_LIFI", "false")
    monkeypatch.setenv("AGGREGATOR_TIMEOUT_MS", "2500")

    settings = Settings()

    assert settings.provider_toggles == {"relay": True, "bungee": True, "lifi": False}
    assert settings.aggregator_timeout_ms == 2500


def test_provider_api_keys_skip_empty(monkeypatch):
    monkeypatch.delenv("BUNGEE_API_KEY", raising=False)
    monkeypatch.delenv("SOCKET_API_KEY", raising=False)
    monkeypatch.setenv("LIFI_API_KEY", "lifi-key")

    settings = Settings()

    assert settings.provider_api_keys == {"lifi": "lifi-key"}
