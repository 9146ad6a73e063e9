from __future__ import annotations

from time import sleep as _sleep
from typing import Callable, TypeVar

T = TypeVar("T")

DEFAULT_RETRY_SECONDS = 1.0


def run_until_success(
    label: str,
    work: Callable[[], T],
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    interval_seconds: float = DEFAULT_RETRY_SECONDS,
    sleep: Callable[[float], None] = _sleep,
) -> T:
    """Call ``work`` until it returns without raising one of ``retry_on``.

    There is no attempt limit. The first failure prints ``Retrying <label>``,
    each later failure adds a dot, and ``Done.`` closes the line once the work
    succeeds. Nothing is printed when the first attempt succeeds.
    """
    retried = False

    while True:
        try:
            result = work()
        except retry_on:
            if retried:
                print(".", end="", flush=True)
            else:
                print(f"Retrying {label}", end="", flush=True)
                retried = True
            sleep(interval_seconds)
            continue

        if retried:
            print(" Done.", flush=True)
        return result
