"""Exception types raised by blkarbs_bench.

Errors raised by a measured callable are never wrapped: they either propagate
unchanged or are captured as the invocation result (see BenchConfig.catch_errors).
"""

from typing import Any


class BenchError(Exception):
    """Base class for errors raised by the harness itself."""


class InvalidTarget(BenchError, TypeError):
    """A value that must be callable is not.

    Raised unconditionally, regardless of the error capture policy.
    """

    def __init__(self, target: Any) -> None:
        self.target = target
        super().__init__(f'The object "{target!r}" is not callable.')


def require_callable(target: Any) -> None:
    if not callable(target):
        raise InvalidTarget(target)
