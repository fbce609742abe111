# /// script
# requires-python = ">=3.10"
# dependencies = ["memo_fib"]
# ///
"""Basic memoisation example — a recursive function made linear by memoise2."""

import logging

from memo_fib import memoise2

logging.basicConfig(level=logging.INFO, format="%(message)s")
log = logging.getLogger(__name__)


@memoise2
def fibonacci(n):
    if n < 2:
        return n
    return fibonacci(n - 1) + fibonacci(n - 2)


if __name__ == "__main__":
    # Without caching this would be exponentially slow
    result = fibonacci(80)
    log.info("fibonacci(80) = %s", result)

    info = fibonacci.cache_info()
    log.info("Cache info: %s", info)

    # Clear and recompute
    fibonacci.cache_clear()
    log.info("Cleared cache, recomputing fibonacci(10) = %s", fibonacci(10))
    log.info("After clear + recompute: %s", fibonacci.cache_info())

    log.info("\nGenerated source:\n%s", fibonacci.__source__)
