"""
Binding of plain Python functions to the invocation boundary.

A session calls its function with the serialized argument tokens. bind() adapts an
ordinary function to that contract:

- parse (optional) converts the token list into whatever the function expects
  (for instance an argparse.ArgumentParser().parse_args, or a schema-aware loader);
  without it the function receives the token list itself.
- Everything the function prints to stdout while running is captured and returned, so
  code written for a terminal (print with escape codes) can feed the styled renderer.
- When nothing was printed, the function's own return value is passed through.

Example
    >>> @bind
    ... def greet(tokens):
    ...     print("\\x1b[32mhello\\x1b[0m", *tokens)
    >>> greet(["world"])
    '\\x1b[32mhello\\x1b[0m world\\n'
"""
import contextlib
import functools
import io
import logging

from .utils import *

logger = logging.getLogger(__name__)


def bind(function=Unset, /, *, parse=Unset):
    """
    Wrap function for use as a session's bound function, capturing its printed output.

    Forms
    - bind(function) / @bind
    - bind(parse=...) -> decorator
    """
    if function is Unset:
        return functools.partial(bind, parse=parse)
    if not callable(function):
        raise TypeError("bind() argument must be callable")
    if parse is not Unset and not callable(parse):
        raise TypeError("bind() 'parse' must be callable")

    @functools.wraps(function)
    def wrapper(tokens, /):
        tokens = list(tokens)
        logger.debug("invoking %s with %r", getattr(function, "__name__", function), tokens)
        argument = parse(tokens) if parse is not Unset else tokens
        with contextlib.redirect_stdout(buffer := io.StringIO()):
            result = function(argument)
        if captured := buffer.getvalue():
            return captured
        return result

    return wrapper


__all__ = (
    "bind",
)
