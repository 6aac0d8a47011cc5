"""Configuration helpers for the storefront service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "models/gemini-1.5-flash-002"
DEFAULT_BRAND_NAME = "LEVEL CUSTOMS"


@dataclass
class SiteConfig:
    """Configuration values for the storefront service.

    Content and quote carts default to local SQLite/JSON files so the service
    runs offline; the Google Sheets sink and the Gemini advisor are only
    reachable when their credentials are provided.
    """

    environment: str | None = None
    content_store_backend: str = "sqlite"
    content_store_path: Optional[str] = None
    quote_session_backend: str = "json"
    quote_session_path: Optional[str] = None
    quote_sink: str = "mock"
    google_sheet_id: Optional[str] = None
    google_credentials_path: Optional[str] = None
    google_service_account_email: Optional[str] = None
    google_private_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    admin_username: Optional[str] = None
    admin_password: Optional[str] = None
    brand_name: str = DEFAULT_BRAND_NAME

    @classmethod
    def from_env(cls) -> "SiteConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets such
        as the service account key can be injected by the runtime.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("SITE_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        sheet_id = get_value("google_sheet_id")
        quote_sink = get_value("quote_sink", "sheets" if sheet_id else "mock")

        return cls(
            environment=env_name,
            content_store_backend=str(get_value("content_store_backend", "sqlite")),
            content_store_path=get_value("content_store_path"),
            quote_session_backend=str(get_value("quote_session_backend", "json")),
            quote_session_path=get_value("quote_session_path"),
            quote_sink=str(quote_sink or "mock"),
            google_sheet_id=sheet_id,
            google_credentials_path=get_value("google_credentials_path"),
            google_service_account_email=get_value("google_service_account_email"),
            google_private_key=get_value("google_private_key"),
            gemini_api_key=get_value("google_api_key"),
            model=str(get_value("model", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL),
            admin_username=get_value("admin_username"),
            admin_password=get_value("admin_password"),
            brand_name=str(get_value("brand_name", DEFAULT_BRAND_NAME) or DEFAULT_BRAND_NAME),
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal ``key: value`` config file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
