"""blkarbs-bench: Quick timing and throughput comparison of Python callables.

Not a statistics tool: no warm-up, no confidence intervals, no outlier
rejection. Use it to answer "is approach A faster than approach B".

Provides:
- run / run_deferred: Milliseconds taken by a single call
- repeat: Milliseconds taken by N sequential calls
- ops_per_second / avg_ops_per_second: Calls completed in a 1 second window
- compare / fastest / faster: Throughput comparison between candidates
- diagnose: All of the above against one target
- wrap: Compose several callables into one
- Bench: Stateful handle persisting (fn, context, args, times)
- BenchConfig: Error capture policy and default repetition count

Usage:
    from blkarbs_bench import BenchConfig, diagnose, fastest, run

    ms = run(expensive_operation, payload)
    report = diagnose(expensive_operation, payload, times=3)
    report.log_summary("Expensive Operation")

    config = BenchConfig(catch_errors=True)
    ms = run(flaky_operation, config=config)
"""

from blkarbs_bench._compare import (
    CandidateThroughput,
    compare,
    faster,
    fastest,
    log_comparison,
)
from blkarbs_bench._config import (
    DEFAULT_CONFIG,
    DEFAULT_REPETITIONS,
    WINDOW_MS,
    BenchConfig,
)
from blkarbs_bench._core import (
    REPORT_KEYS,
    DiagnosticsReport,
    Stopwatch,
    avg_ops_per_second,
    diagnose,
    invoke,
    ops_per_second,
    repeat,
    run,
    run_deferred,
    wrap,
)
from blkarbs_bench._errors import BenchError, InvalidTarget
from blkarbs_bench._handle import Bench

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_REPETITIONS",
    "REPORT_KEYS",
    "WINDOW_MS",
    "Bench",
    "BenchConfig",
    "BenchError",
    "CandidateThroughput",
    "DiagnosticsReport",
    "InvalidTarget",
    "Stopwatch",
    "avg_ops_per_second",
    "compare",
    "diagnose",
    "faster",
    "fastest",
    "invoke",
    "log_comparison",
    "ops_per_second",
    "repeat",
    "run",
    "run_deferred",
    "wrap",
]

__version__ = "0.1.0"
