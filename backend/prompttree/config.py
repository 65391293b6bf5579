"""Environment-driven configuration.

Values come from the process environment, optionally populated from a
``.env`` file by ``load_dotenv`` at startup.
"""

import os
from dataclasses import dataclass, field

DEFAULT_ALLOWED_ORIGINS = ("http://localhost:5173", "http://localhost:3000")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    database_path: str = "prompttree.db"
    host: str = "0.0.0.0"
    port: int = 8080
    environment: str = "development"
    api_key: str = ""
    allowed_origins: tuple[str, ...] = field(default=DEFAULT_ALLOWED_ORIGINS)
    seed_on_startup: bool = True
    log_level: str = "INFO"
    subscriber_queue_size: int = 256


def _get_env(env: dict[str, str], key: str, default: str) -> str:
    value = env.get(key, "").strip()
    return value if value else default


def _get_int(env: dict[str, str], key: str, default: int) -> int:
    raw = _get_env(env, key, str(default))
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def _get_bool(env: dict[str, str], key: str, default: bool) -> bool:
    raw = env.get(key, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from environment variables (``os.environ`` by default)."""
    env = dict(os.environ) if env is None else env

    origins_raw = env.get("ALLOWED_ORIGINS", "").strip()
    allowed_origins = (
        tuple(o.strip() for o in origins_raw.split(",") if o.strip())
        if origins_raw
        else DEFAULT_ALLOWED_ORIGINS
    )

    return Settings(
        database_path=_get_env(env, "DATABASE_PATH", "prompttree.db"),
        host=_get_env(env, "HOST", "0.0.0.0"),
        port=_get_int(env, "PORT", 8080),
        environment=_get_env(env, "ENVIRONMENT", "development"),
        api_key=env.get("API_KEY", "").strip(),
        allowed_origins=allowed_origins,
        seed_on_startup=_get_bool(env, "SEED_ON_STARTUP", True),
        log_level=_get_env(env, "LOG_LEVEL", "INFO").upper(),
        subscriber_queue_size=_get_int(env, "SUBSCRIBER_QUEUE_SIZE", 256),
    )
