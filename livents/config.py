import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

STORE_BACKENDS = ("sql", "memory")


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    host: str = "0.0.0.0"
    service_name: str = "Livents"
    store_backend: str = "sql"
    db_path: str = "livents.db"
    db_url: str | None = None
    db_echo: bool = False
    log_level: str = "INFO"
    heartbeat_seconds: int = 60

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return f"sqlite:///{self.db_path}"


def get_settings() -> Settings:
    store_backend = os.getenv("STORE_BACKEND", "sql").strip().lower()
    if store_backend not in STORE_BACKENDS:
        raise ValueError(
            f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {store_backend!r}"
        )

    return Settings(
        port=_getenv_int("PORT", 3000),
        host=os.getenv("HOST", "0.0.0.0"),
        service_name=os.getenv("SERVICE_NAME", "Livents"),
        store_backend=store_backend,
        db_path=os.getenv("DB_PATH", "livents.db"),
        db_url=os.getenv("DB_URL") or None,
        db_echo=_getenv_bool("DB_ECHO", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        heartbeat_seconds=_getenv_int("HEARTBEAT_SECONDS", 60),
    )
