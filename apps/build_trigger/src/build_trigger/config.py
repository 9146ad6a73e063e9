from dataclasses import dataclass
from functools import lru_cache
import math
import os


class ConfigError(RuntimeError):
    pass


def _to_bool(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_seconds(name: str, *, default: float, minimum: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number of seconds, got {value!r}") from exc
    if not math.isfinite(parsed):
        raise ConfigError(f"{name} must be finite, got {value!r}")
    return max(minimum, parsed)


@dataclass(frozen=True)
class Settings:
    jenkins_url: str
    username: str
    password: str
    app_name: str
    verify_tls: bool
    timeout_seconds: float
    poll_seconds: float
    retry_seconds: float

    @property
    def job_name(self) -> str:
        return f"{self.app_name}-build"

    @property
    def job_url(self) -> str:
        return f"{self.jenkins_url}/job/{self.job_name}"


_REQUIRED = {
    "jenkins_url": "JENKINS_URL",
    "username": "JENKINS_USER",
    "password": "JENKINS_PASSWORD",
    "app_name": "APP_NAME",
}


@lru_cache
def get_settings(app_name: str | None = None) -> Settings:
    """Read settings from the environment; ``app_name`` stands in for APP_NAME."""
    values = {field: os.getenv(env_name, "").strip() for field, env_name in _REQUIRED.items()}
    if app_name:
        values["app_name"] = app_name.strip()
    missing = [_REQUIRED[field] for field, value in values.items() if not value]
    if missing:
        raise ConfigError(f"missing required environment variables: {', '.join(missing)}")

    jenkins_url = values["jenkins_url"].rstrip("/")
    if not jenkins_url.lower().startswith(("http://", "https://")):
        raise ConfigError(f"JENKINS_URL must start with http:// or https://, got {jenkins_url!r}")

    return Settings(
        jenkins_url=jenkins_url,
        username=values["username"],
        password=values["password"],
        app_name=values["app_name"],
        verify_tls=_to_bool(os.getenv("JENKINS_VERIFY_TLS"), default=False),
        timeout_seconds=_to_seconds("JENKINS_TIMEOUT_SECONDS", default=30.0, minimum=1.0),
        poll_seconds=_to_seconds("BUILD_TRIGGER_POLL_SECONDS", default=1.0, minimum=0.1),
        retry_seconds=_to_seconds("BUILD_TRIGGER_RETRY_SECONDS", default=1.0, minimum=0.1),
    )
