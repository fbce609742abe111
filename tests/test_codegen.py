"""Tests for the code-generating memoiser."""

import pytest

import memo_fib._fib
from memo_fib import CacheInfo, _codegen, fib_naive, memoise2
from memo_fib._codegen import render


class TestRecursion:
    def test_recursive_calls_hit_cache(self):
        fib = memoise2(fib_naive)
        assert fib(15) == 610
        assert fib.cache_info() == CacheInfo(hits=13, misses=16, current_size=16)

    def test_each_value_computed_once(self):
        calls = []

        def fib(n):
            calls.append(n)
            if n < 2:
                return n
            return fib(n - 1) + fib(n - 2)

        cached = memoise2(fib)
        assert cached(25) == 75025
        assert sorted(calls) == list(range(26))

        # second call is answered from the cache
        assert cached(25) == 75025
        assert len(calls) == 26

    def test_decorator_usage(self):
        calls = []

        @memoise2
        def fib(n):
            calls.append(n)
            if n < 2:
                return n
            return fib(n - 1) + fib(n - 2)

        assert fib(30) == 832040
        assert len(calls) == 31

    def test_original_global_untouched(self):
        memoise2(fib_naive)
        assert memo_fib._fib.fib_naive is fib_naive
        assert not hasattr(fib_naive, "cache_info")

    def test_separate_caches(self):
        a = memoise2(fib_naive)
        b = memoise2(fib_naive)
        a(10)
        assert b.cache_info().current_size == 0


class TestArguments:
    def test_multiple_arguments(self):
        calls = []

        def binom(n, k):
            calls.append((n, k))
            if k == 0 or k == n:
                return 1
            return binom(n - 1, k - 1) + binom(n - 1, k)

        cached = memoise2(binom)
        assert cached(20, 10) == 184756
        assert len(calls) == len(set(calls))

    def test_same_values_share_key(self):
        calls = []

        def power(base, exp=2):
            calls.append((base, exp))
            return base**exp

        cached = memoise2(power)
        assert cached(3) == 9
        assert cached(3, 2) == 9
        assert cached(base=3, exp=2) == 9
        assert len(calls) == 1
        assert cached(3, 3) == 27
        assert len(calls) == 2

    def test_varargs_and_kwargs(self):
        calls = []

        def total(*nums, scale=1, **extra):
            calls.append(nums)
            return sum(nums) * scale + len(extra)

        cached = memoise2(total)
        assert cached(1, 2, 3) == 6
        assert cached(1, 2, 3) == 6
        assert len(calls) == 1
        assert cached(1, 2, 3, scale=2) == 12
        assert cached(1, 2, 3, flag=True) == 7
        assert cached(1, 2, 3, flag=True) == 7
        assert len(calls) == 3

    def test_annotations_and_docstring(self):
        def double(x: int) -> int:
            """Twice x."""
            return 2 * x

        cached = memoise2(double)
        assert cached(21) == 42
        assert cached.__doc__ == "Twice x."
        assert cached.__wrapped__ is double

    def test_closure_variables(self):
        offset = 100

        def shifted(x):
            return x + offset

        assert memoise2(shifted)(1) == 101

    def test_forward_reference(self):
        @memoise2
        def even(n):
            return True if n == 0 else odd(n - 1)

        def odd(n):
            return False if n == 0 else even(n - 1)

        assert even(10) is True
        assert even(7) is False
        # even(10) stored 10, 8, ..., 0; even(7) stored 7, 5, 3, 1
        assert even.cache_info().current_size == 10

    def test_rebound_closure_variable(self):
        scale = 1

        def times(x):
            return x * scale

        cached = memoise2(times)
        scale = 10
        assert times(2) == 20
        assert cached(2) == 20

    def test_default_uses_original_value(self):
        base = 5

        def add(x, y=base):
            return x + y

        cached = memoise2(add)
        base = 50
        assert cached(1) == 6
        assert cached(1, 5) == 6
        assert cached.cache_info().misses == 1

    def test_body_may_rebind_parameters(self):
        def countdown(n):
            steps = 0
            while n > 0:
                n -= 1
                steps += 1
            return steps

        assert memoise2(countdown)(5) == 5

    def test_unpicklable_argument_propagates(self):
        def first(it):
            return next(it)

        with pytest.raises(TypeError):
            memoise2(first)(x for x in range(3))


class TestErrors:
    def test_builtin(self):
        with pytest.raises(TypeError, match="Python function"):
            memoise2(len)

    def test_class(self):
        class Thing:
            pass

        with pytest.raises(TypeError):
            memoise2(Thing)

    def test_lambda(self):
        square = lambda x: x * x  # noqa: E731
        with pytest.raises(TypeError):
            memoise2(square)

    def test_async_def(self):
        async def fetch(x):
            return x

        with pytest.raises(TypeError, match="plain def"):
            memoise2(fetch)


def test_render_contains_original_body():
    source = render(fib_naive)
    assert source.startswith("def _memo_factory(")
    assert "def fib_naive(n):" in source
    assert "return fib_naive(n - 1) + fib_naive(n - 2)" in source


def test_generated_source_attached():
    cached = memoise2(fib_naive)
    assert cached.__source__ == render(fib_naive)
    assert cached.__name__ == "fib_naive"


def test_cache_clear():
    cached = memoise2(fib_naive)
    cached(20)
    cached.cache_clear()
    assert cached.cache_info() == CacheInfo(0, 0, 0)
    assert cached(20) == 6765


def test_closure_cells_collected_once(monkeypatch):
    seen = []
    collect = _codegen._closure_cells

    def counting(fn):
        seen.append(fn)
        return collect(fn)

    monkeypatch.setattr(_codegen, "_closure_cells", counting)
    memoise2(fib_naive)
    assert seen == [fib_naive]
