from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any, TypeVar, overload

from injectree._internal.cycle_guard import cycle_guard
from injectree._internal.engine import engine
from injectree._internal.implicit import implicit_construction_policy
from injectree._internal.records import ResultRecord
from injectree.exceptions import (
    InvalidScopeConfigurationError,
    MissingOverrideError,
    NonImplicitConstructibleError,
)
from injectree.lock_mode import LockMode
from injectree.providers import Override
from injectree.tokens import NamedToken

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Scope:
    """A node of the injector hierarchy.

    A scope holds the overrides declared when it was created, a cache of
    results resolved through it, and a reference to its parent. Values with
    no scope-specific override are built once and shared by the whole subtree
    beneath the scope that owns them; values depending on an override are
    rebuilt and owned by the most specific scope where that override applies.

    Scopes are resolved synchronously and are not safe for concurrent use
    unless the root was created with ``LockMode.THREAD``.

    Examples:
        .. code-block:: python

            root = create_scope()
            request = root.create_child([provide(User).use_value(current_user)])
            service = request.get(Service)

    """

    __slots__ = ("_lock", "cache", "overrides", "parent", "rank")

    def __init__(
        self,
        overrides: Iterable[Override[Any]] | None = None,
        parent: Scope | None = None,
        *,
        lock_mode: LockMode | None = None,
    ) -> None:
        """Create a scope, optionally beneath ``parent``.

        Args:
            overrides: Recipes local to this scope. When a token appears more
                than once, the last override wins.
            parent: Scope consulted for tokens this scope does not override.
            lock_mode: Locking for the whole hierarchy; only accepted on a
                root scope. Defaults to ``LockMode.NONE``.

        Raises:
            InvalidScopeConfigurationError: If ``parent`` is not a scope, an
                override is not an ``Override``, or ``lock_mode`` is given
                for a child scope.

        """
        if parent is not None and not isinstance(parent, Scope):
            msg = f"Scope parent must be a Scope, got {parent!r}."
            raise InvalidScopeConfigurationError(msg)

        self.parent = parent
        self.rank: int = 0 if parent is None else parent.rank + 1
        self.overrides: dict[Any, ResultRecord] = {}
        self.cache: dict[Any, ResultRecord] = {}
        self._lock = self._resolve_lock(parent, lock_mode)

        for override in overrides or ():
            if not isinstance(override, Override):
                msg = f"Scope overrides must be Override instances, got {override!r}."
                raise InvalidScopeConfigurationError(msg)
            self.overrides[override.token] = ResultRecord(
                token=override.token,
                factory=override.factory,
                holder=self,
            )

        logger.debug(
            "Created scope rank %d with %d overrides",
            self.rank,
            len(self.overrides),
        )

    @staticmethod
    def _resolve_lock(
        parent: Scope | None,
        lock_mode: LockMode | None,
    ) -> threading.RLock | None:
        if parent is not None:
            if lock_mode is not None:
                msg = "lock_mode can only be configured on a root scope."
                raise InvalidScopeConfigurationError(msg)
            return parent._lock
        if lock_mode is None or lock_mode is LockMode.NONE:
            return None
        if lock_mode is LockMode.THREAD:
            return threading.RLock()
        msg = f"Unsupported lock mode {lock_mode!r}."
        raise InvalidScopeConfigurationError(msg)

    @property
    def root(self) -> Scope:
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    def ancestors(self) -> Iterator[Scope]:
        """Iterate from this scope up to the root, inclusive."""
        scope: Scope | None = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def descends_from(self, other: Scope) -> bool:
        """Return true when ``other`` is this scope or one of its ancestors."""
        return any(scope is other for scope in self.ancestors())

    def create_child(self, overrides: Iterable[Override[Any]] | None = None) -> Self:
        """Create a scope whose parent is this scope."""
        return type(self)(overrides, parent=self)

    @overload
    def get(self, token: type[T]) -> T: ...

    @overload
    def get(self, token: NamedToken[T]) -> T: ...

    @overload
    def get(self, token: Any) -> Any: ...

    def get(self, token: Any) -> Any:
        """Return the singleton for ``token`` as seen from this scope.

        Args:
            token: A class or a named token.

        Raises:
            MissingOverrideError: If the token needs an explicit override and
                no scope up to the root provides one.
            NonImplicitConstructibleError: If implicit construction would
                need constructor arguments.
            CyclicDependencyError: If resolution revisits a token in flight.
            InjectionFailedError: If a factory raised any other exception.

        """
        with self.guarded():
            return engine.get(self, token)

    def guarded(self) -> AbstractContextManager[Any]:
        """Return the hierarchy lock, or a no-op context when locking is off."""
        if self._lock is None:
            return nullcontext()
        return self._lock

    def has(self, token: Any) -> bool:
        """Return true when this scope can provide ``token`` without failing lookup.

        Nothing is built. Factories may still raise when the token is resolved.
        """
        for scope in self.ancestors():
            if token in scope.cache or token in scope.overrides:
                return True
        policy = implicit_construction_policy
        return policy.is_eligible(token) and policy.factory_for(token) is not None

    @overload
    def lookup(self, token: Any) -> ResultRecord: ...

    @overload
    def lookup(self, token: Any, boundary: Scope | None) -> ResultRecord | None: ...

    def lookup(self, token: Any, boundary: Scope | None = None) -> ResultRecord | None:
        """Find the most specific record for ``token`` from this scope upward.

        Each scope's cache is consulted before its overrides. With a
        ``boundary``, the walk returns ``None`` once it reaches the boundary,
        without looking at the boundary itself. Without one, a token unknown
        to every scope gets a transient implicit record held by the root.

        Args:
            token: Token to look up.
            boundary: Ancestor at which to stop searching.

        """
        scope: Scope | None = self
        root = self
        while scope is not None:
            if scope is boundary:
                return None
            record = scope.cache.get(token) or scope.overrides.get(token)
            if record is not None:
                return record
            root = scope
            scope = scope.parent
        return root._implicit_record(token)

    def find(self, token: Any) -> ResultRecord | None:
        """Return the most specific stored record for ``token``, or ``None``.

        Unlike ``lookup``, nothing is synthesized for unknown tokens.
        """
        for scope in self.ancestors():
            record = scope.cache.get(token) or scope.overrides.get(token)
            if record is not None:
                return record
        return None

    def _implicit_record(self, token: Any) -> ResultRecord:
        policy = implicit_construction_policy
        if not policy.is_eligible(token):
            raise MissingOverrideError(token, trace=cycle_guard.chain())
        factory = policy.factory_for(token)
        if factory is None:
            raise NonImplicitConstructibleError(token, trace=cycle_guard.chain())
        return ResultRecord(token=token, factory=factory, holder=self)

    def __repr__(self) -> str:
        return f"Scope(rank={self.rank}, overrides={len(self.overrides)})"


def create_scope(
    overrides: Iterable[Override[Any]] | None = None,
    parent: Scope | None = None,
    *,
    lock_mode: LockMode | None = None,
) -> Scope:
    """Create a scope; see ``Scope`` for the arguments."""
    return Scope(overrides, parent, lock_mode=lock_mode)


@overload
def get(scope: Scope, token: type[T]) -> T: ...


@overload
def get(scope: Scope, token: NamedToken[T]) -> T: ...


@overload
def get(scope: Scope, token: Any) -> Any: ...


def get(scope: Scope, token: Any) -> Any:
    """Return the singleton for ``token`` as seen from ``scope``."""
    return scope.get(token)
