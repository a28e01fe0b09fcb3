from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, overload

from injectree._internal.engine import engine
from injectree._internal.resolution_context import resolution_context
from injectree.exceptions import NoActiveScopeError
from injectree.tokens import DUMMY_FACTORY_ATTR, NamedToken, token_label

if TYPE_CHECKING:
    from injectree.scope import Scope

T = TypeVar("T")
R = TypeVar("R")


def _require_active_scope(token: Any) -> Scope:
    scope = resolution_context.active_scope()
    if scope is None:
        msg = (
            f"Cannot inject {token_label(token)}: no active injection context. "
            "Resolve the outermost object with scope.get(...)."
        )
        raise NoActiveScopeError(msg)
    return scope


@overload
def inject(token: type[T]) -> T: ...


@overload
def inject(token: NamedToken[T]) -> T: ...


@overload
def inject(token: Any) -> Any: ...


def inject(token: Any) -> Any:
    """Resolve ``token`` from the scope that is currently building.

    Call it from constructors and factories running under ``Scope.get``.
    The resolved value is recorded as a dependency of the object being
    built, which decides the scope that ends up owning that object.

    Examples:
        .. code-block:: python

            class Service:
                def __init__(self) -> None:
                    self.repository = inject(Repository)

    Raises:
        NoActiveScopeError: If no resolution is in progress.

    """
    scope = _require_active_scope(token)
    return engine.get_in_context(scope, token)


def inject_optional(token: Any, default: Any = None) -> Any:
    """Resolve ``token`` like ``inject``, or return ``default`` when nothing provides it.

    Only a missing provider yields ``default``; errors raised while building
    the token propagate. The absence is remembered, so when a more specific
    scope later overrides ``token`` the dependent object is rebuilt there.

    Args:
        token: Token that may have no override.
        default: Value returned when the token cannot be provided.

    """
    scope = _require_active_scope(token)
    if scope.has(token):
        return engine.get_in_context(scope, token)
    return engine.record_absence(scope, token, default)


class InjectionContext:
    """Captured active scope for constructing objects after ``get`` returned.

    Objects built through ``run`` resolve their ``inject`` calls from the
    captured scope. These resolutions are not recorded as dependencies of the
    capturing object. Only the dummies built by ``get_injection_context``
    count toward where the capturing object is stored.
    """

    __slots__ = ("_scope",)

    def __init__(self, scope: Scope) -> None:
        self._scope = scope

    @property
    def scope(self) -> Scope:
        return self._scope

    def run(self, fn: Callable[[], R]) -> R:
        """Call ``fn`` with the captured scope active."""
        with self._scope.guarded():
            scope_token = resolution_context.enter_scope(self._scope)
            frame_token = resolution_context.suspend_build()
            try:
                return fn()
            finally:
                resolution_context.end_build(frame_token)
                resolution_context.exit_scope(scope_token)


def get_injection_context(*types: type[Any]) -> InjectionContext:
    """Capture the active scope for deferred construction of ``types``.

    Every type must define ``__inject_dummy__``, a classmethod returning a
    ``Dummy``. A dummy of each type is built right away, while the capturing
    object is still being built, so whatever the types inject counts as a
    dependency of the capturing object. The dummy is cleaned up at once.

    Examples:
        .. code-block:: python

            class Report:
                def __init__(self) -> None:
                    self.clock = inject(Clock)

                @classmethod
                def __inject_dummy__(cls) -> Dummy:
                    return Dummy(value=cls(), cleanup=lambda: None)


            class ReportFactory:
                def __init__(self) -> None:
                    self.context = get_injection_context(Report)

                def make(self) -> Report:
                    return self.context.run(Report)

    Raises:
        NoActiveScopeError: If called outside of a resolution.
        TypeError: If no type is given or a type does not define
            ``__inject_dummy__``.

    """
    if not types:
        msg = "get_injection_context() needs the types it will construct; use get_unsafe_injection_context() otherwise."
        raise TypeError(msg)
    context = InjectionContext(_capture_active_scope())
    for cls in types:
        if DUMMY_FACTORY_ATTR not in vars(cls):
            msg = f"{token_label(cls)} must define {DUMMY_FACTORY_ATTR} to be built through an injection context."
            raise TypeError(msg)
        dummy = getattr(cls, DUMMY_FACTORY_ATTR)()
        dummy.cleanup()
    return context


def get_unsafe_injection_context() -> InjectionContext:
    """Capture the active scope without declaring what will be built later.

    Nothing constructed through the returned context counts as a dependency
    of the capturing object. If those objects depend on overrides the
    capturing object does not, the capturing object may be stored in a less
    specific scope than the objects it creates, and shared with scopes whose
    overrides it never sees. Prefer ``get_injection_context(*types)``.

    Raises:
        NoActiveScopeError: If called outside of a resolution.

    """
    return InjectionContext(_capture_active_scope())


def _capture_active_scope() -> Scope:
    scope = resolution_context.active_scope()
    if scope is None:
        msg = "No active injection context to capture. Call it from a constructor resolved by scope.get(...)."
        raise NoActiveScopeError(msg)
    return scope
