"""Stateful benchmark handle.

Bench keeps a target (fn, context, args) and a repetition count so the same
measurement can be repeated or tweaked between runs. Each method forwards to
the free function of the same name with the stored fields.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from beartype import beartype

from blkarbs_bench import _compare, _core
from blkarbs_bench._config import DEFAULT_CONFIG, BenchConfig
from blkarbs_bench._errors import require_callable


class Bench:
    """Persistent (fn, context, args, times) tuple with the measurement API.

    Args:
        fn: The callable to measure
        *args: Positional arguments passed to ``fn`` on every call
        context: Value bound as the first argument of ``fn`` (optional)
        times: Repetition count for repeat/avg_ops_per_second/diagnose/faster
            (default: config.default_repetitions)
        config: Benchmark options (default: DEFAULT_CONFIG)

    Example:
        bench = Bench(sorted, data, times=5)
        bench.run()
        bench.set_args(other_data).repeat()

    Design by Contract:
        - fn is always callable (InvalidTarget otherwise)
        - Extra method arguments are appended after the stored args
    """

    @beartype
    def __init__(
        self,
        fn: Any,
        *args: Any,
        context: Any = None,
        times: int | None = None,
        config: BenchConfig | None = None,
    ) -> None:
        require_callable(fn)
        self._fn = fn
        self._args: list[Any] = list(args)
        self.context = context
        self.times = times
        self.config = config or DEFAULT_CONFIG

    def __repr__(self) -> str:
        return (
            f"Bench(fn={_core.target_name(self._fn)}, args={self._args!r}, "
            f"context={self.context!r}, times={self.times!r})"
        )

    @property
    def fn(self) -> Callable[..., Any]:
        return self._fn

    @fn.setter
    def fn(self, fn: Any) -> None:
        require_callable(fn)
        self._fn = fn

    @property
    def args(self) -> tuple[Any, ...]:
        return tuple(self._args)

    def set_args(self, *args: Any) -> "Bench":
        self._args = list(args)
        return self

    def append_args(self, *args: Any) -> "Bench":
        self._args.extend(args)
        return self

    add_args = append_args

    def prepend_args(self, *args: Any) -> "Bench":
        self._args[:0] = args
        return self

    def clear_args(self) -> "Bench":
        self._args = []
        return self

    # Measurement API

    def run(self, *extra: Any) -> int:
        return _core.run(
            self._fn, *self._args, *extra, context=self.context, config=self.config
        )

    def run_deferred(self, callback: Any, *extra: Any) -> asyncio.Future:
        return _core.run_deferred(
            callback, self._fn, *self._args, *extra,
            context=self.context, config=self.config,
        )

    def repeat(self, *extra: Any) -> int:
        return _core.repeat(
            self._fn, *self._args, *extra,
            times=self.times, context=self.context, config=self.config,
        )

    def ops_per_second(self, *extra: Any) -> int:
        return _core.ops_per_second(
            self._fn, *self._args, *extra, context=self.context, config=self.config
        )

    def avg_ops_per_second(self, *extra: Any) -> float:
        return _core.avg_ops_per_second(
            self._fn, *self._args, *extra,
            times=self.times, context=self.context, config=self.config,
        )

    def diagnose(self, *extra: Any) -> _core.DiagnosticsReport:
        return _core.diagnose(
            self._fn, *self._args, *extra,
            times=self.times, context=self.context, config=self.config,
        )

    def faster(self, *others: Any) -> bool:
        """True if this handle's fn beats ``others`` (see fastest())."""
        return _compare.faster(self._fn, *others, times=self.times, config=self.config)
