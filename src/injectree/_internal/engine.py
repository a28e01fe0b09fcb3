from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from injectree._internal.cycle_guard import CycleGuard, cycle_guard
from injectree._internal.records import ResultRecord, more_specific
from injectree._internal.resolution_context import ResolutionContext, resolution_context
from injectree.exceptions import InjectionError, InjectionFailedError
from injectree.tokens import token_label

if TYPE_CHECKING:
    from injectree.scope import Scope

logger = logging.getLogger(__name__)


class ResolutionEngine:
    """Resolve tokens against a scope hierarchy and decide who owns each result.

    A built value is stored in the override mapping of its holder: the most
    specific scope whose overrides, or whose ancestors' overrides, affect the
    value or anything it transitively consumed. Every scope between a
    requester and the holder caches the result so later lookups are a single
    dictionary hit.
    """

    __slots__ = ("_context", "_guard")

    def __init__(self, context: ResolutionContext, guard: CycleGuard) -> None:
        self._context = context
        self._guard = guard

    def get(self, scope: Scope, token: Any) -> Any:
        """Resolve ``token`` with ``scope`` as the active scope."""
        scope_token = self._context.enter_scope(scope)
        try:
            return self.get_in_context(scope, token)
        finally:
            self._context.exit_scope(scope_token)

    def get_in_context(self, scope: Scope, token: Any) -> Any:
        """Resolve ``token`` assuming ``scope`` is already active."""
        record = self.resolve_tracked(scope, token)
        frame = self._context.build_frame()
        if frame is not None:
            frame.absorb(record)
        return record.value

    def record_absence(self, scope: Scope, token: Any, default: Any) -> Any:
        """Note that ``token`` was optional and unavailable from ``scope``.

        The running factory gets a placeholder dependency held by the root,
        so an override of ``token`` in a more specific scope later forces the
        dependent value to be rebuilt there.
        """
        frame = self._context.build_frame()
        if frame is not None:
            frame.absorb(
                ResultRecord(
                    token=token,
                    factory=lambda: default,
                    holder=scope.root,
                    value=default,
                    dependencies=[],
                ),
            )
        return default

    def resolve_tracked(self, scope: Scope, token: Any) -> ResultRecord:
        self._guard.push(token)
        try:
            return self.resolve(scope, token)
        finally:
            self._guard.pop()

    def resolve(self, scope: Scope, token: Any) -> ResultRecord:
        """Return a built record for ``token`` that is valid for ``scope``."""
        cached = scope.cache.get(token)
        if cached is not None:
            return cached

        record = scope.lookup(token)
        if not record.is_built:
            return self.build_and_store(record, scope)

        holder = self.determine_holder(record, scope)
        if holder is record.holder:
            self.propagate_cache(scope, record)
            return record

        logger.debug(
            "Rebuilding %s: holder moves from rank %d to rank %d",
            token_label(token),
            record.holder.rank,
            holder.rank,
        )
        return self.build_and_store(record, scope, holder=holder)

    def build_and_store(
        self,
        record: ResultRecord,
        scope: Scope,
        *,
        holder: Scope | None = None,
    ) -> ResultRecord:
        """Run the factory of ``record`` and store the result with its holder.

        Args:
            record: Recipe to build; left untouched.
            scope: Scope that requested the value.
            holder: Already decided holder for a forced rebuild. When omitted
                the holder is derived from the recorded dependencies.

        """
        built = record.snapshot(holder=holder)
        frame_token = self._context.begin_build(built, scope)
        try:
            built.value = built.factory()
        except InjectionError:
            raise
        except Exception as error:
            raise InjectionFailedError(error, trace=self._guard.chain()) from error
        finally:
            self._context.end_build(frame_token)

        if not scope.descends_from(built.holder):
            logger.debug(
                "Returning %s unstored: it depends on scope rank %d outside the requesting chain",
                token_label(built.token),
                built.holder.rank,
            )
            return built
        if holder is None:
            built.holder = self.determine_holder(built, scope)
        built.holder.overrides[built.token] = built
        self.propagate_cache(scope, built)
        logger.debug(
            "Built %s held by scope rank %d with %d dependencies",
            token_label(built.token),
            built.holder.rank,
            len(built.dependencies or ()),
        )
        return built

    def determine_holder(self, built: ResultRecord, scope: Scope) -> Scope:
        """Return the most specific scope that must own ``built`` for ``scope``.

        The answer lies between ``scope`` and ``built.holder`` inclusive.
        Records touched on the way are resolved for ``scope`` and cached, so
        later lookups along the same path do not repeat the walk.
        """
        if built.holder is scope:
            return scope
        return _HolderSearch(self, built, scope).run()

    def propagate_cache(self, scope: Scope, built: ResultRecord) -> None:
        """Cache ``built`` in every scope from ``scope`` up to its holder."""
        current: Scope | None = scope
        while current is not None:
            current.cache.setdefault(built.token, built)
            if current is built.holder:
                return
            current = current.parent

    def rebuild_tracked(self, record: ResultRecord, scope: Scope) -> ResultRecord:
        self._guard.push(record.token)
        try:
            return self.build_and_store(record, scope, holder=scope)
        finally:
            self._guard.pop()


class _HolderSearch:
    """Depth-first walk over the recorded dependencies of one built record.

    Dependencies overridden below the current holder, or replaced by a more
    specific record anywhere in the chain, are resolved for the requesting
    scope right away, in first-discovered order, and raise the
    holder to theirs. When the holder reaches the requesting scope the walk
    stops and the records on the current path, which all lead to that
    override, are rebuilt innermost first for the requesting scope.
    """

    __slots__ = ("_engine", "_holder", "_path", "_root", "_scope", "_visited")

    def __init__(self, engine: ResolutionEngine, built: ResultRecord, scope: Scope) -> None:
        self._engine = engine
        self._root = built
        self._scope = scope
        self._holder = built.holder
        self._visited: set[Any] = {built.token}
        self._path: list[ResultRecord] = []

    def run(self) -> Scope:
        self._visit(self._root)
        return self._holder

    def _visit(self, record: ResultRecord) -> bool:
        for dependency in record.dependencies or ():
            if dependency.token in self._visited:
                continue
            self._visited.add(dependency.token)

            cached = self._scope.cache.get(dependency.token)
            if cached is not None:
                self._raise_to(cached.holder)
            elif self._is_replaced(dependency):
                resolved = self._engine.resolve_tracked(self._scope, dependency.token)
                self._raise_to(resolved.holder)
            else:
                self._path.append(dependency)
                if self._visit(dependency):
                    return True
                self._path.pop()

            if self._holder is self._scope:
                self._rebuild_path()
                return True
        return False

    def _is_replaced(self, dependency: ResultRecord) -> bool:
        """Return true when the requesting scope no longer sees ``dependency`` itself.

        Either a record sits below the current holder, or the most specific
        record in the chain, possibly an override at the holder or above it,
        is a different one.
        """
        token = dependency.token
        if self._scope.lookup(token, boundary=self._holder) is not None:
            return True
        current = self._scope.find(token)
        return current is not None and current is not dependency

    def _raise_to(self, holder: Scope) -> None:
        self._holder = more_specific(self._holder, holder)

    def _rebuild_path(self) -> None:
        for record in reversed(self._path):
            if record.token in self._scope.cache:
                continue
            logger.debug(
                "Promoting %s to scope rank %d",
                token_label(record.token),
                self._scope.rank,
            )
            self._engine.rebuild_tracked(record, self._scope)
        self._path.clear()


engine = ResolutionEngine(resolution_context, cycle_guard)
