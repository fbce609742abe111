"""Memoisation by code generation.

``memoise2`` reads a function's source, pulls out its parameter list and
body, and pastes them into a template. The template defines a factory
that owns the cache and a new function with the *same name* as the
original. Since the body is compiled inside that factory, any call the
body makes to its own name resolves to the new, caching function, so
recursive functions get memoised all the way down.

Arguments of any number and kind are supported: the cache key is the MD5
digest of the pickled tuple of argument values.

The generated function shares the closure cells of the original, so free
names resolve in the original defining scope: a name bound after
``memoise2`` runs, or rebound later, is seen on the next call. Defaults
are taken from the original function object rather than re-evaluated.
"""

import ast
import inspect
import logging
import textwrap
import types

from memo_fib._memoise import CacheInfo, checksum

log = logging.getLogger(__name__)

_TEMPLATE = """\
def _memo_factory(_memo_memory, _memo_stats, _memo_checksum{free}):
    def {name}({params}):
        _memo_key = _memo_checksum({key})
        if _memo_key in _memo_memory:
            _memo_stats[0] += 1
            return _memo_memory[_memo_key]
        _memo_stats[1] += 1

        def _memo_body({params}):
{body}

        _memo_res = _memo_body({forward})
        _memo_memory[_memo_key] = _memo_res
        return _memo_res

    return {name}
"""


def _parse_function(fn) -> ast.FunctionDef:
    if not inspect.isfunction(fn):
        raise TypeError(f"memoise2 expects a Python function, got {type(fn).__name__}")
    try:
        source = inspect.getsource(fn)
    except (OSError, TypeError):
        raise TypeError(f"Cannot read the source of {fn.__qualname__!r}") from None
    try:
        tree = ast.parse(textwrap.dedent(source))
    except SyntaxError:
        raise TypeError(f"Cannot parse the source of {fn.__qualname__!r}") from None
    node = tree.body[0] if tree.body else None
    if not isinstance(node, ast.FunctionDef) or node.name != fn.__name__:
        raise TypeError(f"{fn.__qualname__!r} is not defined by a plain def statement")
    return node


def _strip_annotations(args: ast.arguments) -> None:
    for arg in (*args.posonlyargs, *args.args, *args.kwonlyargs, args.vararg, args.kwarg):
        if arg is not None:
            arg.annotation = None


def _key_expr(args: ast.arguments) -> str:
    parts = [a.arg for a in (*args.posonlyargs, *args.args)]
    if args.vararg is not None:
        parts.append(args.vararg.arg)
    parts.extend(a.arg for a in args.kwonlyargs)
    if args.kwarg is not None:
        parts.append(f"tuple(sorted({args.kwarg.arg}.items()))")
    return "(" + "".join(f"{p}, " for p in parts) + ")"


def _forward_expr(args: ast.arguments) -> str:
    parts = [a.arg for a in (*args.posonlyargs, *args.args)]
    if args.vararg is not None:
        parts.append(f"*{args.vararg.arg}")
    parts.extend(f"{a.arg}={a.arg}" for a in args.kwonlyargs)
    if args.kwarg is not None:
        parts.append(f"**{args.kwarg.arg}")
    return ", ".join(parts)


def _blank_defaults(args: ast.arguments) -> None:
    # real defaults are copied from the original function object
    args.defaults = [ast.Constant(None) for _ in args.defaults]
    args.kw_defaults = [None if d is None else ast.Constant(None) for d in args.kw_defaults]


def _closure_cells(fn) -> dict:
    cells = dict(zip(fn.__code__.co_freevars, fn.__closure__ or (), strict=True))
    # the function's own name is bound to the generated function instead
    cells.pop(fn.__name__, None)
    return cells


def _generate(fn) -> tuple[str, dict]:
    node = _parse_function(fn)
    _strip_annotations(node.args)
    _blank_defaults(node.args)
    cells = _closure_cells(fn)
    body = ast.unparse(ast.Module(body=node.body, type_ignores=[]))
    source = _TEMPLATE.format(
        name=node.name,
        params=ast.unparse(node.args),
        key=_key_expr(node.args),
        forward=_forward_expr(node.args),
        free="".join(f", {name}" for name in cells),
        body=textwrap.indent(body, " " * 12),
    )
    return source, cells


def render(fn) -> str:
    """Return the generated source for ``fn`` without compiling it."""
    return _generate(fn)[0]


def _rebind(generated, fn, cells: dict):
    """Rebuild ``generated`` so its free names use the cells of ``fn``."""
    code = generated.__code__
    closure = tuple(
        cells.get(name, cell)
        for name, cell in zip(code.co_freevars, generated.__closure__ or (), strict=True)
    )
    rebound = types.FunctionType(code, fn.__globals__, code.co_name, fn.__defaults__, closure)
    rebound.__kwdefaults__ = dict(fn.__kwdefaults__) if fn.__kwdefaults__ else None
    if fn.__name__ in code.co_freevars:
        closure[code.co_freevars.index(fn.__name__)].cell_contents = rebound
    return rebound


def memoise2(fn):
    """Return a memoised copy of ``fn`` whose recursive calls also hit the cache.

    Raises:
        TypeError: ``fn`` is not a ``def``-defined Python function with
            readable source.
    """
    source, cells = _generate(fn)
    log.debug("memoise2(%s) generated:\n%s", fn.__qualname__, source)

    namespace: dict = {}
    code = compile(source, f"<memoise2 {fn.__qualname__}>", "exec")
    exec(code, fn.__globals__, namespace)

    memory: dict[str, object] = {}
    stats = [0, 0]
    placeholders = dict.fromkeys(cells)
    generated = _rebind(
        namespace["_memo_factory"](memory, stats, checksum, **placeholders), fn, cells
    )

    def cache_info():
        return CacheInfo(stats[0], stats[1], len(memory))

    def cache_clear():
        memory.clear()
        stats[0] = stats[1] = 0

    generated.__qualname__ = fn.__qualname__
    generated.__module__ = fn.__module__
    generated.__doc__ = fn.__doc__
    generated.__wrapped__ = fn
    generated.__source__ = source
    generated.cache_info = cache_info
    generated.cache_clear = cache_clear
    return generated
