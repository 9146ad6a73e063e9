from __future__ import annotations

import argparse
from dataclasses import replace
import math
import sys
from typing import Sequence

from build_trigger.client import JenkinsRequestClient
from build_trigger.config import ConfigError, Settings, get_settings
from build_trigger.jobs import JenkinsJobAccessor
from build_trigger.sequencer import BuildSequencer, ExitCode


def _seconds(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if not math.isfinite(parsed):
        raise argparse.ArgumentTypeError(f"must be finite: {value!r}")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build-trigger",
        description="Schedule a Jenkins build for an app and wait for its result",
    )
    parser.add_argument(
        "--app-name",
        default=None,
        help="Application name; the job built is <app-name>-build (overrides APP_NAME)",
    )
    parser.add_argument(
        "--poll-seconds",
        type=_seconds,
        default=None,
        help="Seconds between status polls (overrides BUILD_TRIGGER_POLL_SECONDS)",
    )
    parser.add_argument(
        "--verify-tls",
        action="store_true",
        help="Validate the server certificate (overrides JENKINS_VERIFY_TLS)",
    )
    return parser


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.poll_seconds is not None:
        settings = replace(settings, poll_seconds=max(0.1, args.poll_seconds))
    if args.verify_tls:
        settings = replace(settings, verify_tls=True)
    return settings


def run_build(settings: Settings) -> ExitCode:
    if not settings.verify_tls:
        print(
            f"[build-trigger] WARNING: TLS certificate validation is DISABLED for {settings.jenkins_url}",
            flush=True,
        )

    client = JenkinsRequestClient(
        username=settings.username,
        password=settings.password,
        verify_tls=settings.verify_tls,
        timeout_seconds=settings.timeout_seconds,
        retry_seconds=settings.retry_seconds,
    )
    jobs = JenkinsJobAccessor(client=client, job_url=settings.job_url)
    sequencer = BuildSequencer(jobs, job_name=settings.job_name, poll_seconds=settings.poll_seconds)
    return sequencer.run()


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(get_settings(args.app_name), args)
    except ConfigError as exc:
        print(f"[build-trigger] configuration error: {exc}", file=sys.stderr, flush=True)
        raise SystemExit(1) from exc

    raise SystemExit(int(run_build(settings)))


if __name__ == "__main__":
    main()
