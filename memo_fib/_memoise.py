import functools
import hashlib
import pickle
from typing import NamedTuple


class CacheInfo(NamedTuple):
    hits: int
    misses: int
    current_size: int


def checksum(values: tuple) -> str:
    """MD5 hex digest of the pickled argument tuple."""
    return hashlib.md5(pickle.dumps(values)).hexdigest()


def memoise(fn):
    """Cache a one-argument function, keyed by ``str(arg)``.

    Recursive calls *inside* ``fn`` go straight to ``fn``, not through the
    returned wrapper, so for recursive functions only the outermost call
    is cached.
    """
    memory = {}
    hits = misses = 0

    def wrapper(x):
        nonlocal hits, misses
        key = str(x)
        if key in memory:
            hits += 1
            return memory[key]
        misses += 1
        res = fn(x)
        memory[key] = res
        return res

    def cache_info():
        return CacheInfo(hits, misses, len(memory))

    def cache_clear():
        nonlocal hits, misses
        memory.clear()
        hits = misses = 0

    functools.update_wrapper(wrapper, fn)
    wrapper.cache_info = cache_info
    wrapper.cache_clear = cache_clear
    return wrapper


class MemoisedFunction:
    """Open-recursive memoiser: ``fn`` receives this object as its first argument.

    Recursion goes through ``self``, so every nested call is looked up in
    the cache. The cache is an ordinary attribute of the instance.
    """

    def __init__(self, fn):
        if not callable(fn):
            raise TypeError(f"memoise_open expects a callable, got {type(fn).__name__}")
        self._fn = fn
        self._memory: dict[str, object] = {}
        self._hits = 0
        self._misses = 0
        self.__wrapped__ = fn
        self.__name__ = getattr(fn, "__name__", repr(fn))
        self.__qualname__ = getattr(fn, "__qualname__", self.__name__)
        self.__module__ = getattr(fn, "__module__", None)
        self.__doc__ = getattr(fn, "__doc__", None)

    def __call__(self, *args, **kwargs):
        key = checksum((args, tuple(sorted(kwargs.items()))))
        try:
            res = self._memory[key]
        except KeyError:
            pass
        else:
            self._hits += 1
            return res
        self._misses += 1
        res = self._fn(self, *args, **kwargs)
        self._memory[key] = res
        return res

    def cache_info(self):
        return CacheInfo(self._hits, self._misses, len(self._memory))

    def cache_clear(self):
        self._memory.clear()
        self._hits = 0
        self._misses = 0

    def __repr__(self):
        return f"<MemoisedFunction {self.__qualname__}>"


def memoise_open(fn):
    return MemoisedFunction(fn)
