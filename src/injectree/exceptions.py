from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from injectree.tokens import token_label


class InjectreeError(Exception):
    """Represent a base class for all injectree-specific failures.

    Catch this type when you want to handle any injectree error path without
    matching each concrete exception class individually.
    """


class InvalidScopeConfigurationError(InjectreeError):
    """Signal invalid arguments passed while creating a scope.

    Raised by ``create_scope``/``Scope`` when the parent is not a ``Scope``,
    when an override entry is not an ``Override``, or when a lock mode is
    given to a non-root scope.
    """


class NoActiveScopeError(InjectreeError):
    """Signal use of ``inject`` outside of any resolution.

    ``inject`` and ``inject_optional`` only work while a factory is running
    under ``Scope.get``. Typical fix is resolving the outermost object with
    ``scope.get(...)`` instead of constructing it directly.
    """


class InjectionError(InjectreeError):
    """Base class for failures raised while resolving a token.

    The message carries the in-flight resolution chain captured when the
    error is created, in the form ``Failed to inject (A -> B -> Key): reason``.
    Nested factories re-raise instances of this class unchanged, so the trace
    always points at the place of the original failure.
    """

    def __init__(self, reason: str, *, trace: Sequence[Any]) -> None:
        self.reason = reason
        self.trace = tuple(trace)
        chain = " -> ".join(token_label(token) for token in self.trace)
        super().__init__(f"Failed to inject ({chain}): {reason}")


class MissingOverrideError(InjectionError):
    """Signal that a token requiring an explicit override has none.

    Raised for named tokens, for classes marked with ``no_implicit_inject``
    and for abstract classes when no scope between the requesting scope and
    the root overrides them.

    Typical fix is adding ``provide(token).use(...)`` to one of the scopes.
    """

    def __init__(self, token: Any, *, trace: Sequence[Any]) -> None:
        self.token = token
        super().__init__(
            f"Missing explicit override for {token_label(token)}.",
            trace=trace,
        )


class NonImplicitConstructibleError(InjectionError):
    """Signal that implicit construction would need constructor arguments.

    Typical fixes include overriding the token explicitly or defining an
    ``__inject_factory__`` classmethod that builds a default instance.
    """

    def __init__(self, token: Any, *, trace: Sequence[Any]) -> None:
        self.token = token
        super().__init__(
            f"{token_label(token)} is not implicitly injectable: constructor requires arguments.",
            trace=trace,
        )


class CyclicDependencyError(InjectionError):
    """Signal that the resolution path revisits a token already in flight.

    The trace ends with the offending token, so it reads as the full cycle.
    """

    def __init__(self, token: Any, *, trace: Sequence[Any]) -> None:
        self.token = token
        super().__init__(f"Cycle detected on {token_label(token)}.", trace=trace)


class InjectionFailedError(InjectionError):
    """Wrap an arbitrary exception raised by a factory.

    The original exception is available as ``original`` and ``__cause__``.
    Wrapping happens once, at the innermost failing factory.
    """

    def __init__(self, original: Exception, *, trace: Sequence[Any]) -> None:
        self.original = original
        super().__init__(f"{type(original).__name__}: {original}", trace=trace)
