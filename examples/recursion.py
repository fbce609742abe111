# /// script
# requires-python = ">=3.10"
# dependencies = ["memo_fib"]
# ///
"""Why a plain wrapper does not memoise recursion — memoise vs memoise2 vs memoise_open."""

import logging
import time

from memo_fib import fib_naive, fib_open, memoise, memoise2, memoise_open

logging.basicConfig(level=logging.INFO, format="%(message)s")
log = logging.getLogger(__name__)

N = 27


def timed(label, fn):
    t0 = time.perf_counter()
    value = fn(N)
    elapsed = time.perf_counter() - t0
    log.info("%14s: fib(%d) = %d in %.4fs  %s", label, N, value, elapsed, fn.cache_info())


if __name__ == "__main__":
    wrapped = memoise(fib_naive)
    # Inner calls go to fib_naive directly: first call is as slow as no cache
    timed("memoise", wrapped)
    # Only the outer call was stored, so the repeat is a hit
    timed("memoise again", wrapped)

    # Recursive calls are rebound to the caching function
    timed("memoise2", memoise2(fib_naive))

    # Recursion goes through the explicit self-reference
    timed("memoise_open", memoise_open(fib_open))
