from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

# ASGI types
Scope = dict[str, Any]
Message = dict[str, Any]
Receive = Callable[[], Awaitable[Message]]
Send = Callable[[Message], Awaitable[None]]
ASGIApp = Callable[[Scope, Receive, Send], Awaitable[None]]

# Raw header pairs as found in scope["headers"]
RawHeaders = list[tuple[bytes, bytes]]


@runtime_checkable
class HeaderLookup(Protocol):
    """
    Read side of a header store.
    starlette.datastructures.Headers satisfies this.
    """
    def getlist(self, key: str) -> list[str]: ...


@runtime_checkable
class MutableHeaderStore(Protocol):
    """
    Write side of a header store.
    starlette.datastructures.MutableHeaders satisfies this.
    """
    def __setitem__(self, key: str, value: str) -> None: ...
