import logging

from numba import njit

log = logging.getLogger(__name__)


@njit
def fib_native(x):
    if x == 0:
        return 0
    if x == 1:
        return 1
    return fib_native(x - 1) + fib_native(x - 2)


def warm_up():
    """Trigger JIT compilation so later timings exclude it."""
    log.debug("compiling fib_native")
    fib_native(0)
