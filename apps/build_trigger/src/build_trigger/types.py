from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class JenkinsError(RuntimeError):
    pass


class ParseError(JenkinsError):
    pass


def _require_object(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ParseError(f"Invalid {what} payload: expected a JSON object")
    return payload


def _optional_build_number(value: Any, what: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError(f"Invalid {what} payload: build number must be a non-negative integer")
    return value


@dataclass(frozen=True)
class JobSnapshot:
    last_build_number: int | None
    queue_item: Any | None

    @property
    def last_build_or_zero(self) -> int:
        return self.last_build_number if self.last_build_number is not None else 0

    @property
    def queued(self) -> bool:
        return self.queue_item is not None

    @classmethod
    def from_payload(cls, payload: Any) -> JobSnapshot:
        data = _require_object(payload, "job")
        for key in ("lastBuild", "queueItem"):
            if key not in data:
                raise ParseError(f"Invalid job payload: missing {key}")

        last_build = data["lastBuild"]
        if last_build is None:
            number = None
        else:
            last_build = _require_object(last_build, "job lastBuild")
            if "number" not in last_build:
                raise ParseError("Invalid job payload: lastBuild is missing number")
            number = _optional_build_number(last_build["number"], "job")
            if number is None:
                raise ParseError("Invalid job payload: lastBuild number is null")

        return cls(last_build_number=number, queue_item=data["queueItem"])


@dataclass(frozen=True)
class BuildSnapshot:
    number: int | None
    building: bool
    result: str | None

    @property
    def succeeded(self) -> bool:
        return self.result == "SUCCESS"

    @classmethod
    def from_payload(cls, payload: Any) -> BuildSnapshot:
        data = _require_object(payload, "build")
        building = data.get("building")
        if not isinstance(building, bool):
            raise ParseError("Invalid build payload: missing building flag")

        result = data.get("result")
        if result is not None and not isinstance(result, str):
            raise ParseError("Invalid build payload: result must be a string")

        return cls(
            number=_optional_build_number(data.get("number"), "build"),
            building=building,
            result=result,
        )
