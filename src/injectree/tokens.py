from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")
C = TypeVar("C", bound=type[Any])

NO_IMPLICIT_INJECT_ATTR = "__no_implicit_inject__"
"""Class attribute that forbids implicit construction of exactly that class."""

INJECT_FACTORY_ATTR = "__inject_factory__"
"""Optional zero-argument classmethod used for implicit construction."""

DUMMY_FACTORY_ATTR = "__inject_dummy__"
"""Zero-argument classmethod returning a ``Dummy``, required by ``get_injection_context``."""


class NamedToken(Generic[T]):
    """Opaque resolution key carrying a debug label.

    Named tokens compare by identity: two tokens created with the same name
    are different keys. They are never implicitly constructible, so every
    named token needs an explicit override somewhere up the scope chain.

    Examples:
        .. code-block:: python

            DatabaseUrl: NamedToken[str] = key("DatabaseUrl")
            root = create_scope([provide(DatabaseUrl).use_value("sqlite://")])

    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"NamedToken({self.name!r})"


class Dummy(NamedTuple):
    """Throwaway instance built only to record what a type injects."""

    value: Any
    cleanup: Callable[[], None]


def key(name: str) -> NamedToken[Any]:
    """Create a named token used for values that are not classes.

    Args:
        name: Label shown in injection traces.

    """
    return NamedToken(name)


def no_implicit_inject(cls: C) -> C:
    """Mark a class so it is only resolvable through an explicit override.

    The marker applies to the decorated class only; subclasses stay
    implicitly constructible unless decorated themselves.

    Examples:
        .. code-block:: python

            @no_implicit_inject
            class Clock:
                def now(self) -> float: ...

    """
    setattr(cls, NO_IMPLICIT_INJECT_ATTR, True)
    return cls


def forbids_implicit_inject(cls: type[Any]) -> bool:
    return bool(vars(cls).get(NO_IMPLICIT_INJECT_ATTR, False))


def token_label(token: Any) -> str:
    """Return the label used for a token in injection traces."""
    if isinstance(token, NamedToken):
        return token.name
    name = getattr(token, "__name__", None)
    if isinstance(name, str):
        return name
    return repr(token)
