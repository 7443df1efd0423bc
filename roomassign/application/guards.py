import inspect
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar, cast

from roomassign.application.errors import EventNotFoundError

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def event_exists(func: F) -> F:
    """Raise EventNotFoundError before ``func`` runs if its event is unknown.

    The wrapped coroutine method must take an ``event_id`` parameter; it is
    resolved by name, so positional and keyword calls behave the same.
    """
    signature = inspect.signature(func)
    if "event_id" not in signature.parameters:
        raise TypeError(f"{func.__qualname__} has no event_id parameter")

    @wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        event_id = signature.bind(self, *args, **kwargs).arguments["event_id"]
        if await self._store.get_event(event_id) is None:
            raise EventNotFoundError(event_id)
        return await func(self, *args, **kwargs)

    return cast(F, wrapper)
