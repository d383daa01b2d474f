# utils/config.py
# Runtime settings for the billing client, read from the environment.
import os
from dataclasses import dataclass
from pathlib import Path


def _optional_float(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


@dataclass(frozen=True)
class Settings:
    base_url: str = "http://localhost:8000"
    storage_dir: Path = Path("data/storage")
    log_dir: Path = Path("data/logs")
    # None means requests never time out
    timeout: float | None = None

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            base_url=env.get("BILLING_BACKEND_URL", cls.base_url).rstrip("/"),
            storage_dir=Path(env.get("BILLING_STORAGE_DIR", str(cls.storage_dir))),
            log_dir=Path(env.get("BILLING_LOG_DIR", str(cls.log_dir))),
            timeout=_optional_float(env.get("BILLING_HTTP_TIMEOUT")),
        )
