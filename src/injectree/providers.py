from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from injectree.inject import inject

T = TypeVar("T")

Factory = Callable[[], Any]
"""A zero-argument callable producing the value for a token."""


@dataclass(frozen=True, slots=True)
class Override(Generic[T]):
    """A recipe declaring how a scope produces a token.

    Overrides are passed to ``create_scope``. The factory runs lazily, at most
    once per owning scope, and may call ``inject`` to request other tokens.
    """

    token: Any
    factory: Callable[[], T]


class Provider(Generic[T]):
    """Build ``Override`` objects for one token.

    Examples:
        .. code-block:: python

            provide(Service).use(lambda: Service("custom"))
            provide(Service).use_value(existing_service)
            provide(Service).use_existing(FakeService)

    """

    __slots__ = ("_token",)

    def __init__(self, token: Any) -> None:
        self._token = token

    def use(self, factory: Callable[[], T]) -> Override[T]:
        """Produce the token by calling ``factory``.

        Args:
            factory: Zero-argument callable invoked when the token is first
                needed by a scope that sees this override.

        """
        return Override(self._token, factory)

    def use_factory(self, factory: Callable[[], T]) -> Override[T]:
        """Alias of ``use`` that reads better next to ``use_value``."""
        return self.use(factory)

    def use_value(self, value: T) -> Override[T]:
        """Produce an already constructed object or a plain value.

        Args:
            value: Object returned as-is for every resolution of the token.

        """
        return Override(self._token, lambda: value)

    def use_existing(self, other: Any) -> Override[T]:
        """Re-key the token to another token resolved from the same scope.

        Args:
            other: Token whose resolved value is returned for this token.

        """
        return Override(self._token, lambda: inject(other))


def provide(token: Any) -> Provider[Any]:
    """Start building an override for ``token``."""
    return Provider(token)
