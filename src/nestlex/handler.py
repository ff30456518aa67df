"""Handler boundary — hands grouped root tokens to caller-supplied evaluation."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol, runtime_checkable

from nestlex.tokens import Token


@runtime_checkable
class Handler(Protocol):
    """Turns a completed token (children included) into a semantic value.

    The handler owns recursion: if a group's children need evaluating, it
    walks ``token.children`` itself.
    """

    def evaluate(self, token: Token) -> Any: ...


HandlerLike = Handler | Callable[[Token], Any]


def resolve(handler: HandlerLike) -> Callable[[Token], Any]:
    """Return the callable behind a Handler object or plain function."""
    if isinstance(handler, Handler):
        return handler.evaluate
    if callable(handler):
        return handler
    raise TypeError(f"handler must be callable or define evaluate(), got {type(handler).__name__}")


def dispatch(tokens: Iterable[Token], handler: HandlerLike) -> list[Any]:
    """Evaluate each root token left to right and store the result on it.

    The first exception raised by the handler stops dispatch and propagates.
    """
    evaluate = resolve(handler)
    values = []
    for token in tokens:
        token.value = evaluate(token)
        values.append(token.value)
    return values
