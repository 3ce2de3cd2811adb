"""Benchmark configuration.

Design by Contract:
- default_repetitions MUST be >= 1 (crash otherwise)
- Configuration is immutable; derive variants with with_overrides()
"""

from dataclasses import dataclass, replace
from typing import Any

from beartype import beartype

# Length of one throughput sampling window, in milliseconds. Not configurable.
WINDOW_MS = 1000

DEFAULT_REPETITIONS = 10


@beartype
@dataclass(frozen=True)
class BenchConfig:
    """Options shared by every measurement primitive.

    Args:
        catch_errors: If True, exceptions raised by the measured callable are
            returned as its result instead of propagating (default: False)
        default_repetitions: Repetition count used when ``times`` is omitted
            (default: 10)

    Example:
        config = BenchConfig(catch_errors=True)
        ms = run(flaky_operation, config=config)
    """

    catch_errors: bool = False
    default_repetitions: int = DEFAULT_REPETITIONS

    def __post_init__(self) -> None:
        assert self.default_repetitions >= 1, (
            f"Default repetitions must be positive: {self.default_repetitions}"
        )

    def resolve_times(self, times: int | None) -> int:
        """Return ``times``, or the configured default when it is None."""
        return self.default_repetitions if times is None else times

    def with_overrides(self, **changes: Any) -> "BenchConfig":
        return replace(self, **changes)


DEFAULT_CONFIG = BenchConfig()
