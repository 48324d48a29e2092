import os
from dataclasses import dataclass

DEFAULT_ZKWV_SALT = "interpretreflect-zkwv-2025"


@dataclass(frozen=True)
class StoreSettings:
    base_url: str
    anon_key: str
    save_timeout_seconds: float
    read_timeout_seconds: float

    @property
    def rest_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/rest/v1"


def load_store_settings() -> StoreSettings:
    return StoreSettings(
        base_url=os.getenv("SUPABASE_URL", "http://localhost:54321").strip(),
        anon_key=os.getenv("SUPABASE_ANON_KEY", "").strip(),
        save_timeout_seconds=_float_env("REFLECTION_SAVE_TIMEOUT_SECONDS", 5.0),
        read_timeout_seconds=_float_env("STORE_READ_TIMEOUT_SECONDS", 15.0),
    )


def zkwv_salt() -> str:
    return os.getenv("ZKWV_SALT", DEFAULT_ZKWV_SALT)


def jwt_secret() -> str:
    return os.getenv("SUPABASE_JWT_SECRET", "change-me-in-production")


def side_write_max_retries() -> int:
    try:
        return int(os.getenv("SIDE_WRITE_MAX_RETRIES", "5"))
    except ValueError:
        return 5


def cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def service_role_key() -> str | None:
    """Credential used by background workers, which hold no user session."""
    return os.getenv("SUPABASE_SERVICE_ROLE_KEY", "").strip() or None


def side_write_max_attempts() -> int:
    """Total runs, across replays, before a side write is parked as dead."""
    default = 3 * (side_write_max_retries() + 1)
    try:
        return max(int(os.getenv("SIDE_WRITE_MAX_ATTEMPTS", str(default))), 1)
    except ValueError:
        return default
