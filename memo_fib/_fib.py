from memo_fib._memoise import CacheInfo


def fib_naive(n):
    """Plain double recursion, exponential in ``n``."""
    if n == 0:
        return 0
    if n == 1:
        return 1
    return fib_naive(n - 1) + fib_naive(n - 2)


def fib_open(self, n):
    """Fibonacci body that recurses through ``self`` (see ``memoise_open``)."""
    if n == 0:
        return 0
    if n == 1:
        return 1
    return self(n - 1) + self(n - 2)


def make_memo_fib():
    """Return a Fibonacci function with its own private memory.

    Lookups are keyed by ``str(x)``. Base cases are returned directly and
    never stored.
    """
    memory: dict[str, int] = {}
    hits = misses = 0

    def memo_fib(x):
        nonlocal hits, misses
        key = str(x)
        if key in memory:
            hits += 1
            return memory[key]
        misses += 1
        if x == 0:
            return 0
        if x == 1:
            return 1
        res = memo_fib(x - 1) + memo_fib(x - 2)
        memory[key] = res
        return res

    def cache_info():
        return CacheInfo(hits, misses, len(memory))

    def cache_clear():
        nonlocal hits, misses
        memory.clear()
        hits = misses = 0

    memo_fib.cache_info = cache_info
    memo_fib.cache_clear = cache_clear
    return memo_fib


fib_memo = make_memo_fib()
