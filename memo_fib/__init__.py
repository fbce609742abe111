from memo_fib._codegen import memoise2
from memo_fib._fib import fib_memo, fib_naive, fib_open, make_memo_fib
from memo_fib._memoise import CacheInfo, MemoisedFunction, memoise, memoise_open
from memo_fib._native import fib_native

__all__ = [
    "CacheInfo",
    "fib_memo",
    "fib_naive",
    "fib_native",
    "fib_open",
    "make_memo_fib",
    "memoise",
    "memoise2",
    "memoise_open",
    "MemoisedFunction",
]
