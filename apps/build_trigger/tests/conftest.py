from collections.abc import Iterator

import pytest

from build_trigger.config import get_settings


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def jenkins_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JENKINS_URL", "https://jenkins.test/")
    monkeypatch.setenv("JENKINS_USER", "deploy")
    monkeypatch.setenv("JENKINS_PASSWORD", "s3cret")
    monkeypatch.setenv("APP_NAME", "web")
    for name in (
        "JENKINS_VERIFY_TLS",
        "JENKINS_TIMEOUT_SECONDS",
        "BUILD_TRIGGER_POLL_SECONDS",
        "BUILD_TRIGGER_RETRY_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()
