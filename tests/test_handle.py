"""Tests for the Bench stateful handle."""

import asyncio

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from blkarbs_bench import DEFAULT_CONFIG, Bench, BenchConfig, InvalidTarget


def recorder():
    calls = []

    def fn(*args):
        calls.append(args)

    return fn, calls


class TestBenchAccessors:
    def test_defaults(self):
        fn, _ = recorder()
        bench = Bench(fn)
        assert bench.fn is fn
        assert bench.args == ()
        assert bench.context is None
        assert bench.times is None
        assert bench.config is DEFAULT_CONFIG

    def test_non_callable_rejected(self):
        with pytest.raises(InvalidTarget):
            Bench("nope")

    def test_fn_setter_validates(self):
        fn, _ = recorder()
        bench = Bench(fn)
        bench.fn = len
        assert bench.fn is len
        with pytest.raises(InvalidTarget):
            bench.fn = 12
        assert bench.fn is len

    def test_args_mutators_chain(self):
        fn, _ = recorder()
        bench = Bench(fn, 2, 3)
        assert bench.append_args(4).prepend_args(0, 1).args == (0, 1, 2, 3, 4)
        assert bench.set_args("a").add_args("b").args == ("a", "b")
        assert bench.clear_args().args == ()

    def test_args_returns_copy(self):
        fn, _ = recorder()
        bench = Bench(fn, 1)
        args = bench.args
        bench.append_args(2)
        assert args == (1,)

    def test_beartype_rejects_non_int_times(self):
        with pytest.raises(BeartypeCallHintParamViolation):
            Bench(len, times="5")

    def test_repr_names_function(self):
        assert "len" in repr(Bench(len, "abc"))


class TestBenchMeasurements:
    def test_run_uses_stored_fields_and_extra_args(self):
        fn, calls = recorder()
        bench = Bench(fn, 1, context="ctx")
        assert bench.run(2) >= 0
        assert calls == [("ctx", 1, 2)]

    def test_repeat_uses_stored_times(self):
        fn, calls = recorder()
        Bench(fn, times=3).repeat()
        assert len(calls) == 3

    def test_repeat_falls_back_to_config_default(self):
        fn, calls = recorder()
        Bench(fn, config=BenchConfig(default_repetitions=2)).repeat()
        assert len(calls) == 2

    def test_rebinding_between_runs(self):
        fn, calls = recorder()
        bench = Bench(fn, "a", times=1)
        bench.repeat()
        bench.context = "ctx"
        bench.set_args("b")
        bench.repeat()
        assert calls == [("a",), ("ctx", "b")]

    def test_catch_errors_from_config(self):
        def boom():
            raise ValueError("boom")

        bench = Bench(boom, times=2)
        with pytest.raises(ValueError):
            bench.repeat()
        bench.config = BenchConfig(catch_errors=True)
        assert bench.repeat() >= 0

    def test_ops_per_second(self, fake_clock):
        assert Bench(lambda: None).ops_per_second() == 999

    def test_avg_ops_per_second(self, fake_clock):
        assert Bench(lambda: None, times=2).avg_ops_per_second() == pytest.approx(999.0)

    def test_diagnose(self, fake_clock):
        fn, calls = recorder()
        report = Bench(fn, "x", context="ctx", times=1).diagnose()
        assert dict(report) == {
            "run": 1,
            "repeat": 1,
            "ops_per_second": 999,
            "avg_ops_per_second": 999.0,
        }
        assert set(calls) == {("ctx", "x")}

    def test_faster(self, fake_clock):
        def heavy():
            fake_clock.advance(1)

        def light():
            pass

        assert Bench(heavy, times=1).faster(light) is True
        assert Bench(light, times=1).faster(heavy) is False

    def test_run_deferred(self):
        fn, calls = recorder()
        received = []
        bench = Bench(fn, 1, context="ctx")

        async def main():
            return await bench.run_deferred(lambda *a: received.append(a), 2)

        ms = asyncio.run(main())
        assert ms >= 0
        assert calls == [("ctx", 1, 2)]
        assert received[0][2] is fn
        assert received[0][3:] == ("ctx", (1, 2))
