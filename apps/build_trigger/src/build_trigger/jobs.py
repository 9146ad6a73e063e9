from __future__ import annotations

from typing import Any, Protocol

from build_trigger.client import JenkinsRequestClient
from build_trigger.types import BuildSnapshot, JenkinsError, JobSnapshot, ParseError

SCHEDULED_STATUS_CODES = frozenset({200, 201, 302})


class JenkinsHTTPError(JenkinsError):
    def __init__(self, *, action: str, url: str, status_code: int, status_text: str) -> None:
        super().__init__(f"{action} failed: HTTP {status_code} {status_text} from {url}")
        self.url = url
        self.status_code = status_code
        self.status_text = status_text


class JobStatus(Protocol):
    def job_available(self) -> bool: ...

    def jobs_info(self) -> JobSnapshot: ...

    def job_info(self, build_number: int) -> BuildSnapshot: ...

    def schedule_build(self) -> None: ...


class JenkinsJobAccessor:
    def __init__(self, *, client: JenkinsRequestClient, job_url: str) -> None:
        self._client = client
        self._job_url = job_url.rstrip("/")

    @property
    def job_url(self) -> str:
        return self._job_url

    def job_available(self) -> bool:
        response = self._client.request("GET", f"{self._job_url}/api/json", "job availability check")
        return response.status_code == 200

    def jobs_info(self) -> JobSnapshot:
        payload = self._get_json(f"{self._job_url}/api/json", "job lookup")
        return JobSnapshot.from_payload(payload)

    def job_info(self, build_number: int) -> BuildSnapshot:
        payload = self._get_json(
            f"{self._job_url}/{build_number}/api/json",
            f"build #{build_number} lookup",
        )
        return BuildSnapshot.from_payload(payload)

    def schedule_build(self) -> None:
        url = f"{self._job_url}/build"
        response = self._client.request("POST", url, "build scheduling")
        if response.status_code not in SCHEDULED_STATUS_CODES:
            raise JenkinsHTTPError(
                action="Scheduling build",
                url=url,
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

    def _get_json(self, url: str, label: str) -> Any:
        response = self._client.request("GET", url, label)
        if response.status_code != 200:
            raise JenkinsHTTPError(
                action=label.capitalize(),
                url=url,
                status_code=response.status_code,
                status_text=response.reason_phrase,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"{label.capitalize()} returned invalid JSON from {url}") from exc
