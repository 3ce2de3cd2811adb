"""Core measurement primitives.

Design by Contract (P1 - MANDATORY):
- Elapsed time MUST be non-negative (crash if negative)
- Counts MUST be non-negative (crash if negative)
- Non-callable targets raise InvalidTarget, independent of error capture
- Fail-fast on violations

Every primitive funnels its calls through invoke(), so context binding and
the error capture policy behave the same everywhere. All public functions use
beartype for runtime type enforcement.
"""

import asyncio
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any

from beartype import beartype
from loguru import logger

from blkarbs_bench._config import DEFAULT_CONFIG, WINDOW_MS, BenchConfig
from blkarbs_bench._errors import require_callable

REPORT_KEYS = ("run", "repeat", "ops_per_second", "avg_ops_per_second")


def _now_ms() -> int:
    return time.monotonic_ns() // 1_000_000


def target_name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


class Stopwatch:
    """Context manager measuring elapsed milliseconds around a code block.

    Attributes:
        elapsed_ms: Milliseconds elapsed between enter and exit (MUST be >= 0)

    Example:
        with Stopwatch() as watch:
            expensive_operation()
        print(f"Elapsed: {watch.elapsed_ms}ms")

    Design by Contract:
        - elapsed_ms >= 0 (crashes if negative - clock went backwards)
        - elapsed_ms is set even when the block raises
    """

    def __init__(self) -> None:
        self.elapsed_ms: int = 0
        self._start: int = 0

    def __enter__(self) -> "Stopwatch":
        self._start = _now_ms()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed_ms = self.split()

    def split(self) -> int:
        """Milliseconds elapsed since enter, without stopping the watch."""
        elapsed = _now_ms() - self._start
        assert elapsed >= 0, (
            f"Elapsed time cannot be negative: {elapsed}ms. "
            f"System clock went backwards or timing bug."
        )
        return elapsed


@beartype
def invoke(
    fn: Any,
    context: Any = None,
    args: Sequence[Any] = (),
    *,
    catch_errors: bool = False,
) -> Any:
    """Call ``fn`` with ``context`` bound as its first argument.

    ``fn(context, *args)`` is called, or ``fn(*args)`` when context is None.
    With ``catch_errors`` the raised exception is returned as the result.
    """
    require_callable(fn)
    call_args = tuple(args) if context is None else (context, *args)
    if not catch_errors:
        return fn(*call_args)
    try:
        return fn(*call_args)
    except Exception as exc:
        return exc


@beartype
def run(
    fn: Any,
    *args: Any,
    context: Any = None,
    config: BenchConfig | None = None,
) -> int:
    """Measure the milliseconds a single call to ``fn`` takes.

    Only synchronous work is measured; the callable's result is discarded.

    Args:
        fn: The callable to measure
        *args: Positional arguments passed to ``fn``
        context: Value bound as the first argument of ``fn`` (optional)
        config: Benchmark options (default: DEFAULT_CONFIG)

    Returns:
        Elapsed milliseconds (>= 0)
    """
    config = config or DEFAULT_CONFIG
    with Stopwatch() as watch:
        invoke(fn, context, args, catch_errors=config.catch_errors)
    logger.debug(f"run({target_name(fn)}): {watch.elapsed_ms}ms")
    return watch.elapsed_ms


@beartype
def run_deferred(
    callback: Any,
    fn: Any,
    *args: Any,
    context: Any = None,
    config: BenchConfig | None = None,
) -> asyncio.Future:
    """Schedule a single measurement of ``fn`` on the running event loop.

    The measurement starts once the caller yields to the loop and is itself
    synchronous. When it finishes, ``callback(ms, result, fn, context, args)``
    is called and the returned future resolves to ``ms``. Exceptions from
    ``fn`` (with capture off) or from ``callback`` are set on the future.
    Cancelling the future before the loop runs it skips the measurement.

    Raises:
        RuntimeError: If no event loop is running
    """
    require_callable(callback)
    require_callable(fn)
    config = config or DEFAULT_CONFIG
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _measure() -> None:
        if future.cancelled():
            return
        try:
            with Stopwatch() as watch:
                result = invoke(fn, context, args, catch_errors=config.catch_errors)
            callback(watch.elapsed_ms, result, fn, context, args)
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
        else:
            logger.debug(f"run_deferred({target_name(fn)}): {watch.elapsed_ms}ms")
            if not future.done():
                future.set_result(watch.elapsed_ms)

    loop.call_soon(_measure)
    return future


@beartype
def repeat(
    fn: Any,
    *args: Any,
    times: int | None = None,
    context: Any = None,
    config: BenchConfig | None = None,
) -> int:
    """Measure the total milliseconds of ``times`` sequential calls to ``fn``.

    ``times <= 0`` performs no calls. The total is not divided by ``times``.
    """
    config = config or DEFAULT_CONFIG
    times = config.resolve_times(times)
    require_callable(fn)
    with Stopwatch() as watch:
        for _ in range(times):
            invoke(fn, context, args, catch_errors=config.catch_errors)
    logger.debug(f"repeat({target_name(fn)}, times={times}): {watch.elapsed_ms}ms")
    return watch.elapsed_ms


@beartype
def ops_per_second(
    fn: Any,
    *args: Any,
    context: Any = None,
    config: BenchConfig | None = None,
) -> int:
    """Count how many calls to ``fn`` complete within one second.

    The clock is sampled before every call, so the count under-reports what
    ``fn`` alone could achieve. Only meaningful for comparisons. A single slow
    call overruns the window by its own duration.
    """
    config = config or DEFAULT_CONFIG
    require_callable(fn)
    ops = 0
    with Stopwatch() as watch:
        while watch.split() < WINDOW_MS:
            invoke(fn, context, args, catch_errors=config.catch_errors)
            ops += 1
    logger.debug(f"ops_per_second({target_name(fn)}): {ops} ops in {watch.elapsed_ms}ms")
    return ops


@beartype
def avg_ops_per_second(
    fn: Any,
    *args: Any,
    times: int | None = None,
    context: Any = None,
    config: BenchConfig | None = None,
) -> float:
    """Average ``times`` samples of ops_per_second (about ``times`` seconds).

    Returns 0.0 when ``times <= 0``.
    """
    config = config or DEFAULT_CONFIG
    times = config.resolve_times(times)
    require_callable(fn)
    if times <= 0:
        logger.warning(f"avg_ops_per_second({target_name(fn)}) called with times={times}, no samples taken")
        return 0.0
    total = 0
    for _ in range(times):
        total += ops_per_second(fn, *args, context=context, config=config)
    avg = total / times
    logger.debug(f"avg_ops_per_second({target_name(fn)}, times={times}): {avg:.1f} ops")
    return avg


@dataclass(frozen=True)
class DiagnosticsReport(Mapping):
    """Results of every measurement primitive against one target.

    Behaves as a read-only mapping with exactly the keys in REPORT_KEYS.
    """

    run: int
    repeat: int
    ops_per_second: int
    avg_ops_per_second: float

    def __getitem__(self, key: str) -> float:
        if key not in REPORT_KEYS:
            raise KeyError(key)
        return getattr(self, key)

    def __iter__(self) -> Iterator[str]:
        return iter(REPORT_KEYS)

    def __len__(self) -> int:
        return len(REPORT_KEYS)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    @beartype
    def log_summary(self, title: str = "DIAGNOSTICS") -> None:
        """Log the report as a small table via loguru.

        Args:
            title: Header title for the table
        """
        logger.info("")
        logger.info("=" * 60)
        logger.info(f"{title:^60}")
        logger.info("=" * 60)
        logger.info(f"{'Measurement':<30} {'Result':>29}")
        logger.info("-" * 60)
        logger.info(f"{'run':<30} {self.run:>27}ms")
        logger.info(f"{'repeat':<30} {self.repeat:>27}ms")
        logger.info(f"{'ops_per_second':<30} {self.ops_per_second:>25} ops")
        logger.info(f"{'avg_ops_per_second':<30} {self.avg_ops_per_second:>25.1f} ops")
        logger.info("=" * 60)
        logger.info("")


@beartype
def diagnose(
    fn: Any,
    *args: Any,
    times: int | None = None,
    context: Any = None,
    config: BenchConfig | None = None,
) -> DiagnosticsReport:
    """Run every measurement primitive against the same target.

    Measurements run one after another; the total cost is dominated by
    avg_ops_per_second (about ``times`` seconds plus one for ops_per_second).
    An error raised by ``fn`` with capture off aborts the whole report.

    Example:
        report = diagnose(fn, times=3)
        # -> DiagnosticsReport(run=0, repeat=1, ops_per_second=123456,
        #                      avg_ops_per_second=123456.7)
    """
    config = config or DEFAULT_CONFIG
    times = config.resolve_times(times)
    return DiagnosticsReport(
        run=run(fn, *args, context=context, config=config),
        repeat=repeat(fn, *args, times=times, context=context, config=config),
        ops_per_second=ops_per_second(fn, *args, context=context, config=config),
        avg_ops_per_second=avg_ops_per_second(
            fn, *args, times=times, context=context, config=config
        ),
    )


@beartype
def wrap(*fns: Any) -> Callable[..., None]:
    """Compose callables into one that calls each in order with the same arguments.

    Every argument is validated before anything is returned. Return values of
    the wrapped callables are discarded.

    Raises:
        InvalidTarget: If any argument is not callable
    """
    for fn in fns:
        require_callable(fn)

    def wrapped(*args: Any, **kwargs: Any) -> None:
        for fn in fns:
            fn(*args, **kwargs)

    wrapped.__qualname__ = f"wrap({', '.join(target_name(fn) for fn in fns)})"
    return wrapped
