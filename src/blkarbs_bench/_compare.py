"""Throughput comparison between candidate callables.

Candidates are measured one after another with avg_ops_per_second, called
without context or arguments. Each candidate costs about ``times`` seconds.

Note: fastest() selects the candidate with the LOWEST averaged throughput.
That is the established behaviour callers depend on, even though the name
suggests the highest.
"""

import math
from collections.abc import Callable
from typing import Any, NamedTuple

from beartype import beartype
from loguru import logger

from blkarbs_bench import _core
from blkarbs_bench._config import DEFAULT_CONFIG, BenchConfig
from blkarbs_bench._errors import require_callable


class CandidateThroughput(NamedTuple):
    fn: Callable[..., Any]
    avg_ops_per_second: float


@beartype
def compare(
    *candidates: Any,
    times: int | None = None,
    config: BenchConfig | None = None,
) -> list[CandidateThroughput]:
    """Measure the averaged throughput of each candidate, in input order.

    Raises:
        InvalidTarget: If any candidate is not callable (checked before
            anything is measured)
    """
    config = config or DEFAULT_CONFIG
    times = config.resolve_times(times)
    for fn in candidates:
        require_callable(fn)
    return [
        CandidateThroughput(fn, _core.avg_ops_per_second(fn, times=times, config=config))
        for fn in candidates
    ]


@beartype
def fastest(
    *candidates: Any,
    times: int | None = None,
    config: BenchConfig | None = None,
) -> Callable[..., Any]:
    """Return the candidate with the minimum averaged throughput.

    Ties go to the earliest candidate.

    Example:
        fastest(light, heavy, times=3)
        # -> heavy (the lower ops/s count wins)

    Raises:
        ValueError: If no candidates are given
    """
    if not candidates:
        raise ValueError("fastest() requires at least one candidate")
    results = compare(*candidates, times=times, config=config)

    winner = results[0].fn
    best = math.inf
    for fn, avg in results:
        if avg < best:
            best = avg
            winner = fn
    logger.debug(f"fastest of {len(results)} candidates: {_core.target_name(winner)} ({best:.1f} ops)")
    return winner


@beartype
def faster(
    candidate: Any,
    *rest: Any,
    times: int | None = None,
    config: BenchConfig | None = None,
) -> bool:
    """True if ``candidate`` is the one fastest() picks among all arguments."""
    return fastest(candidate, *rest, times=times, config=config) is candidate


@beartype
def log_comparison(
    results: list[CandidateThroughput],
    title: str = "COMPARISON RESULTS",
) -> None:
    """Log a formatted table of compare() results.

    Args:
        results: Output of compare()
        title: Header title for the table
    """
    logger.info("")
    logger.info("=" * 70)
    logger.info(f"{title:^70}")
    logger.info("=" * 70)
    logger.info(f"{'Candidate':<50} {'Avg ops/s':>19}")
    logger.info("-" * 70)
    for fn, avg in results:
        logger.info(f"{_core.target_name(fn):<50} {avg:>19.1f}")
    logger.info("=" * 70)
    logger.info("")
