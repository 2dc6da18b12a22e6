"""Settings loaded from the environment."""
from cake_pricing.config.settings import Settings


def test_defaults(tmp_path, monkeypatch):
    for name in ("APP_HOST", "APP_PORT", "CAKE_PRICING_STRUCTURE", "CAKE_PRICING_BACKUPS",
                 "LOG_LEVEL", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    settings = Settings.load(tmp_path)
    assert settings.api_host == "0.0.0.0"
    assert settings.api_port == 5000
    assert settings.pricing_structure == tmp_path / 'data' / 'pricing-structure.json'
    assert settings.backups_dir == tmp_path / 'data' / 'backups'
    assert settings.cors_origins == ["*"]


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_HOST", "127.0.0.1")
    monkeypatch.setenv("APP_PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://shop.example, https://admin.example")
    monkeypatch.setenv("CAKE_PRICING_STRUCTURE", str(tmp_path / "rules.json"))

    settings = Settings.load(tmp_path)
    assert settings.api_host == "127.0.0.1"
    assert settings.api_port == 8080
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://shop.example", "https://admin.example"]
    assert settings.pricing_structure == tmp_path / "rules.json"
