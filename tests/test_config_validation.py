from charades_config import CharadesConfig, load_config_from_env


def test_runtime_config_validation_flags_partial_cloudflare_settings():
    config = CharadesConfig(
        store_backend="cloudflare",
        cf_account_id="acct",
        cf_api_token="",
        cf_games_namespace_id="games-ns",
        store_timeout_seconds=0,
    )

    warnings = config.validate_runtime_config()
    assert len(warnings) == 3
    assert any("CF_API_TOKEN" in warning for warning in warnings)
    assert any("CF_PHRASES_NAMESPACE_ID" in warning for warning in warnings)
    assert any("STORE_TIMEOUT_SECONDS" in warning for warning in warnings)


def test_runtime_config_validation_passes_for_defaults():
    assert CharadesConfig().validate_runtime_config() == []


def test_runtime_config_validation_flags_unknown_store_and_prod_memory():
    assert CharadesConfig(store_backend="redis").validate_runtime_config()
    warnings = CharadesConfig(store_backend="memory", is_prod=True).validate_runtime_config()
    assert any("memory" in warning for warning in warnings)


def test_load_config_from_env(monkeypatch):
    monkeypatch.setattr("charades_config.load_dotenv", lambda: None)
    monkeypatch.setenv("CHARADES_STORE", " Memory ")
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("STORE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("IS_PROD", "true")
    monkeypatch.setenv("CORS_ORIGIN", "https://charades.example.com")

    config = load_config_from_env()
    assert config.store_backend == "memory"
    assert config.port == 8787
    assert config.store_timeout_seconds == 2.5
    assert config.is_prod is True
    assert config.cors_origin == "https://charades.example.com"
