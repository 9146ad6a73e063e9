from __future__ import annotations

from enum import IntEnum
from time import sleep as _sleep
from typing import Callable

import httpx

from build_trigger.jobs import JobStatus
from build_trigger.types import JenkinsError

FATAL_ERRORS = (JenkinsError, httpx.HTTPError)


class ExitCode(IntEnum):
    SUCCESS = 0
    JOB_UNAVAILABLE = 1
    SCHEDULE_FAILED = 2
    SCHEDULE_CONFIRM_LOOKUP_FAILED = 3
    SCHEDULE_CONFIRM_STATUS_FAILED = 4
    COMPLETION_LOOKUP_FAILED = 5
    BUILD_CANCELLED = 6


def _fail(message: str, exc: BaseException, code: ExitCode, *, mid_line: bool = False) -> ExitCode:
    if mid_line:
        print(flush=True)
    print(message, flush=True)
    print(f"Error: {exc}", flush=True)
    return code


class BuildSequencer:
    """Schedules one build of a job and follows it until it finishes.

    Phases run strictly in order: preflight, baseline snapshot, schedule,
    confirm scheduled, confirm complete. The first fatal error ends the run
    with that phase's exit code. Nothing is undone on failure; a build that
    was scheduled stays scheduled.
    """

    def __init__(
        self,
        jobs: JobStatus,
        *,
        job_name: str,
        poll_seconds: float = 1.0,
        sleep: Callable[[float], None] = _sleep,
    ) -> None:
        self._jobs = jobs
        self._job_name = job_name
        self._poll_seconds = poll_seconds
        self._sleep = sleep

    def run(self) -> ExitCode:
        print(f"Checking that job {self._job_name} is available...", flush=True)
        try:
            available = self._jobs.job_available()
        except FATAL_ERRORS as exc:
            return _fail(f"Could not reach job {self._job_name}.", exc, ExitCode.JOB_UNAVAILABLE)
        if not available:
            print(f"Job {self._job_name} does not exist or is unreachable.", flush=True)
            return ExitCode.JOB_UNAVAILABLE

        try:
            baseline = self._jobs.jobs_info().last_build_or_zero
        except FATAL_ERRORS as exc:
            return _fail("Error looking up the last build number.", exc, ExitCode.JOB_UNAVAILABLE)
        next_build = baseline + 1

        print(f"Scheduling build #{next_build} of {self._job_name}...", flush=True)
        try:
            self._jobs.schedule_build()
        except FATAL_ERRORS as exc:
            return _fail("Error scheduling the build.", exc, ExitCode.SCHEDULE_FAILED)

        code = self._wait_until_started(next_build)
        if code is not None:
            return code

        return self._wait_until_finished(next_build)

    def _last_build(self) -> int:
        return self._jobs.jobs_info().last_build_or_zero

    def _wait_until_started(self, next_build: int) -> ExitCode | None:
        print(f"Waiting for build #{next_build} to start", end="", flush=True)
        while True:
            try:
                last_build = self._last_build()
            except FATAL_ERRORS as exc:
                return _fail(
                    "Error looking up the build number while confirming the schedule.",
                    exc,
                    ExitCode.SCHEDULE_CONFIRM_LOOKUP_FAILED,
                    mid_line=True,
                )
            if last_build == next_build:
                break

            try:
                queued = self._jobs.jobs_info().queued
            except FATAL_ERRORS as exc:
                return _fail(
                    "Error checking the queue status while confirming the schedule.",
                    exc,
                    ExitCode.SCHEDULE_CONFIRM_STATUS_FAILED,
                    mid_line=True,
                )

            if not queued:
                # Off the queue without a new build number: Jenkins dropped the item.
                try:
                    last_build = self._last_build()
                except FATAL_ERRORS as exc:
                    return _fail(
                        "Error looking up the build number while confirming the schedule.",
                        exc,
                        ExitCode.COMPLETION_LOOKUP_FAILED,
                        mid_line=True,
                    )
                if last_build == next_build:
                    break
                print(flush=True)
                print("BUILD FAILED/CANCELLED", flush=True)
                return ExitCode.BUILD_CANCELLED

            print(".", end="", flush=True)
            self._sleep(self._poll_seconds)

        print(" Done.", flush=True)
        return None

    def _wait_until_finished(self, build_number: int) -> ExitCode:
        print(f"Waiting for build #{build_number} to finish", end="", flush=True)
        while True:
            try:
                build = self._jobs.job_info(build_number)
            except FATAL_ERRORS as exc:
                return _fail(
                    f"Error looking up build #{build_number} while waiting for it to finish.",
                    exc,
                    ExitCode.COMPLETION_LOOKUP_FAILED,
                    mid_line=True,
                )
            if not build.building:
                break
            print(".", end="", flush=True)
            self._sleep(self._poll_seconds)

        print(" Done.", flush=True)
        if build.succeeded:
            print("SUCCESS", flush=True)
            return ExitCode.SUCCESS

        print("FAILED", flush=True)
        # Exit 1 also covers an unsuccessful build.
        return ExitCode.JOB_UNAVAILABLE
