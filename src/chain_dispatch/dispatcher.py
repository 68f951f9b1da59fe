"""
Chain of Responsibility (Behavioral) — reusable dispatch core.

Intent:
    Pass a request along an ordered chain of handlers; the first handler that
    consumes the request produces the result and the walk stops there.

Participants:
    - Handler: decides whether it consumes a request (returns a value) or lets
      it pass (returns None).
    - Chain: immutable ordered sequence of handlers, built once.
    - Outcome: either Handled(value) from the first consuming handler, or
      UNHANDLED when the chain is exhausted.

Notes:
    - First match wins; handlers after the consuming one are never called.
    - A chain is read-only after construction, so one chain can serve any
      number of dispatches.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, Tuple, TypeVar, Union

__all__ = [
    "ChainError",
    "ChainConfigurationError",
    "UnhandledRequestError",
    "Handled",
    "Unhandled",
    "UNHANDLED",
    "Outcome",
    "Handler",
    "FunctionHandler",
    "Chain",
    "build_chain",
    "dispatch",
]

logger = logging.getLogger(__name__)

Req = TypeVar("Req")
T = TypeVar("T")


# ---------- Errors ----------

class ChainError(Exception):
    """
    Base class for chain-related errors.
    """


class ChainConfigurationError(ChainError, TypeError):
    """
    Raised when a chain is built from something that is not a handler,
    or when the same handler instance is linked twice.
    """


class UnhandledRequestError(ChainError, LookupError):
    """
    Raised by `Unhandled.unwrap()` for callers that treat an exhausted chain as a failure.
    """


# ---------- Outcome ----------

@dataclass(frozen=True, slots=True)
class Handled(Generic[T]):
    """
    The request was consumed.

    :param value: Result produced by the consuming handler.
    :param handler: Name of the consuming handler.
    :param position: Zero-based index of that handler in the chain.
    """
    value: T
    handler: str
    position: int

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> T:
        """
        :return: The handler's result value.
        """
        return self.value


@dataclass(frozen=True, slots=True)
class Unhandled:
    """
    No handler in the chain consumed the request. Falsy; compare with UNHANDLED.
    """

    def __bool__(self) -> bool:
        return False

    def unwrap(self) -> Any:
        """
        :raises UnhandledRequestError: Always.
        """
        raise UnhandledRequestError("No handler in the chain accepted the request.")


UNHANDLED = Unhandled()

Outcome = Union[Handled[T], Unhandled]


# ---------- Handlers ----------

class Handler(ABC, Generic[Req, T]):
    """
    Common contract for a link in the chain.

    Handlers do not know about their successor; ordering belongs to the Chain.
    Implementations should be stateless with respect to dispatch so a chain can
    be shared; inject configuration via `__init__`.
    """

    @property
    def name(self) -> str:
        """
        :return: Label used in outcomes and logs (class name by default).
        """
        return type(self).__name__

    @abstractmethod
    def handle(self, request: Req) -> Optional[T]:
        """
        Decides whether this handler consumes the request.

        :param request: The incoming request.
        :return: A result value when consumed; None to let the request pass on.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FunctionHandler(Handler[Req, T]):
    """
    Adapts a plain callable into a Handler.

    :param fn: Callable taking the request and returning a result or None.
    :param name: Optional label; defaults to the callable's `__name__`.
    """

    def __init__(self, fn: Callable[[Req], Optional[T]], name: Optional[str] = None) -> None:
        self._fn = fn
        self._name = name or getattr(fn, "__name__", repr(fn))

    @property
    def name(self) -> str:
        return self._name

    def handle(self, request: Req) -> Optional[T]:
        return self._fn(request)

    def __repr__(self) -> str:
        return f"FunctionHandler({self._name!r})"


def _as_handler(spec: Any, position: int) -> Handler:
    if isinstance(spec, Handler):
        return spec
    if isinstance(spec, type):
        raise ChainConfigurationError(
            f"Chain entry #{position} is a class, not an instance: {spec.__name__}"
        )
    if callable(spec):
        return FunctionHandler(spec)
    raise ChainConfigurationError(
        f"Chain entry #{position} is neither a Handler nor a callable: {spec!r}"
    )


# ---------- Chain ----------

class Chain(Generic[Req, T]):
    """
    Immutable, ordered sequence of handlers.

    :param handlers: Handlers in dispatch order. Each instance may appear once.
    :raises ChainConfigurationError: On a non-Handler entry or a repeated instance.
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Iterable[Handler[Req, T]] = ()) -> None:
        links: Tuple[Handler[Req, T], ...] = tuple(handlers)
        seen = set()
        for position, handler in enumerate(links):
            if not isinstance(handler, Handler):
                raise ChainConfigurationError(
                    f"Chain entry #{position} is not a Handler: {handler!r}"
                )
            if id(handler) in seen:
                raise ChainConfigurationError(
                    f"Handler {handler.name} appears more than once (entry #{position})"
                )
            seen.add(id(handler))
        object.__setattr__(self, "_handlers", links)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable; use then() to extend it")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def handlers(self) -> Tuple[Handler[Req, T], ...]:
        return self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[Handler[Req, T]]:
        return iter(self._handlers)

    def __repr__(self) -> str:
        return "Chain(" + " -> ".join(h.name for h in self._handlers) + ")"

    def then(self, spec: Union[Handler[Req, T], Callable[[Req], Optional[T]]]) -> "Chain[Req, T]":
        """
        Returns a new chain with one more link at the tail; this chain is left untouched.

        :param spec: A Handler or a callable (wrapped in FunctionHandler).
        :return: The extended chain.
        """
        return Chain(self._handlers + (_as_handler(spec, len(self._handlers)),))

    def dispatch(self, request: Req) -> Outcome[T]:
        """
        Walks the chain until a handler consumes the request.

        Handler exceptions propagate unchanged.

        :param request: The incoming request.
        :return: Handled from the first consuming handler, or UNHANDLED.
        """
        total = len(self._handlers)
        for position, handler in enumerate(self._handlers):
            logger.debug("Offering %r to %s (%d/%d)", request, handler.name, position + 1, total)
            result = handler.handle(request)
            if result is not None:
                logger.debug("%r handled by %s", request, handler.name)
                return Handled(result, handler.name, position)
        logger.debug("%r left unhandled after %d handler(s)", request, total)
        return UNHANDLED


def build_chain(specs: Iterable[Any]) -> Chain:
    """
    Builds a chain from an ordered list of handler specs.

    :param specs: Handler instances or callables `request -> Optional[result]`.
    :return: The chain, in the given order.
    :raises ChainConfigurationError: If a spec is neither, or an instance repeats.
    """
    return Chain(_as_handler(spec, position) for position, spec in enumerate(specs))


def dispatch(chain: Chain[Req, T], request: Req) -> Outcome[T]:
    """
    Function form of `Chain.dispatch`.

    :param chain: Chain to walk.
    :param request: The incoming request.
    :return: Handled or UNHANDLED.
    """
    return chain.dispatch(request)
