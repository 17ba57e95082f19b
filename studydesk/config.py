# studydesk/config.py

import os
from typing import Optional
import yaml
from pydantic import BaseModel, Field
import anyio


class LibraryConfig(BaseModel):
    root: Optional[str] = None        # Master folder; None until selected
    follow_symlinks: bool = False


class StoreConfig(BaseModel):
    path: str = "./data/catalog"


class CategoriesConfig(BaseModel):
    seed_file: str = "configs/categories.yaml"


class ScanConfig(BaseModel):
    """File classification table used by the scanner and live resolver."""
    video_extensions: list[str] = Field(default_factory=lambda: [".mp4", ".mkv", ".webm"])
    document_extensions: list[str] = Field(default_factory=lambda: [".pdf"])


class StudyConfig(BaseModel):
    # None disables the deadline on an open-item session
    open_timeout_seconds: Optional[float] = None


class LoggingConfig(BaseModel):
    level: str = "INFO"
    console: bool = True
    json_file: Optional[str] = None


class APIConfig(BaseModel):
    """Configuration for REST API server."""
    host: str = "127.0.0.1"
    port: int = 8010
    cors_origins: list[str] = Field(default_factory=lambda: [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ])
    cors_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "OPTIONS"])
    cors_headers: list[str] = Field(default_factory=lambda: ["Content-Type", "X-Request-ID"])
    debug: bool = False


class Config(BaseModel):
    library: LibraryConfig = Field(default_factory=LibraryConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    categories: CategoriesConfig = Field(default_factory=CategoriesConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    study: StudyConfig = Field(default_factory=StudyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    @property
    def library_root(self) -> Optional[str]:
        return self.library.root


def _get_env_value(name: str) -> Optional[str]:
    """Get environment variable value, treating empty as unset."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _get_env_int(name: str) -> Optional[int]:
    value = _get_env_value(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer") from e


def _apply_env_overrides(config: Config) -> Config:
    library_root = _get_env_value("STUDYDESK_LIBRARY_ROOT")
    if library_root is not None:
        config.library.root = library_root

    store_path = _get_env_value("STUDYDESK_STORE_PATH")
    if store_path is not None:
        config.store.path = store_path

    api_host = _get_env_value("API_HOST")
    if api_host is not None:
        config.api.host = api_host

    api_port = _get_env_int("API_PORT")
    if api_port is not None:
        config.api.port = api_port

    log_level = _get_env_value("LOG_LEVEL")
    if log_level is not None:
        config.logging.level = log_level.upper()

    return config


async def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from YAML file (async)."""
    path = anyio.Path(config_path or "configs/settings.yaml")
    if await path.exists():
        text = await path.read_text()
        # Run YAML parsing in a thread to avoid blocking the event loop
        data = await anyio.to_thread.run_sync(yaml.safe_load, text)
        config = Config(**data) if data else Config()
        return _apply_env_overrides(config)

    return _apply_env_overrides(Config())
