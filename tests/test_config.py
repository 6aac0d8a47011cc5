"""Site configuration from environment variables and environment files."""

from pathlib import Path

import pytest

from site_app.config import DEFAULT_GEMINI_MODEL, SiteConfig

_CONFIG_VARS = [
    "APP_ENV",
    "APP_CONFIG_PATH",
    "SITE_CONFIG_DIR",
    "GOOGLE_SHEET_ID",
    "QUOTE_SINK",
    "GOOGLE_API_KEY",
    "CONTENT_STORE_BACKEND",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "MODEL",
    "BRAND_NAME",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in _CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_run_offline() -> None:
    config = SiteConfig.from_env()
    assert config.environment is None
    assert config.content_store_backend == "sqlite"
    assert config.quote_sink == "mock"
    assert config.model == DEFAULT_GEMINI_MODEL
    assert config.brand_name == "LEVEL CUSTOMS"


def test_sheet_id_switches_default_sink(monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_SHEET_ID", "sheet-123")
    monkeypatch.setenv("GOOGLE_API_KEY", "key-abc")
    config = SiteConfig.from_env()
    assert config.quote_sink == "sheets"
    assert config.gemini_api_key == "key-abc"

    monkeypatch.setenv("QUOTE_SINK", "mock")
    assert SiteConfig.from_env().quote_sink == "mock"


def test_environment_file_is_merged_under_env_vars(monkeypatch, tmp_path: Path) -> None:
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "staging.yaml").write_text(
        "# staging\n"
        "content_store_backend: json\n"
        "admin_username: 'admin'\n"
        "admin_password: \"from-file\"\n"
        "brand_name: Staging Customs\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("SITE_CONFIG_DIR", str(env_dir))
    monkeypatch.setenv("ADMIN_PASSWORD", "from-env")

    config = SiteConfig.from_env()

    assert config.environment == "staging"
    assert config.content_store_backend == "json"
    assert config.admin_username == "admin"
    assert config.admin_password == "from-env"
    assert config.brand_name == "Staging Customs"
