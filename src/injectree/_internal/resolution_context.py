from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import TYPE_CHECKING

from injectree._internal.records import ResultRecord, more_specific

if TYPE_CHECKING:
    from injectree.scope import Scope


@dataclass(slots=True)
class BuildFrame:
    """Dependency recorder for one running factory."""

    record: ResultRecord
    scope: Scope

    def absorb(self, dependency: ResultRecord) -> None:
        """Record ``dependency`` and raise the provisional holder if needed.

        Records from another hierarchy are treated as opaque values. A record
        held by a descendant or a sibling branch of the requesting scope still
        raises the holder, which leaves the result unstored for the requester.
        """
        holder = dependency.holder
        if holder.root is not self.scope.root:
            return
        dependencies = self.record.dependencies
        if dependencies is not None:
            dependencies.append(dependency)
        self.record.holder = more_specific(self.record.holder, holder)


class ResolutionContext:
    """Ambient state shared by nested resolutions on one call chain.

    Holds the active scope, so factories can call ``inject`` without an
    explicit scope, and the currently building frame, so nested resolutions
    are attributed to the factory that triggered them. Both slots are context
    variables restored in strict LIFO order.
    """

    __slots__ = ("_active_scope_var", "_build_frame_var")

    def __init__(self) -> None:
        self._active_scope_var: ContextVar[Scope | None] = ContextVar(
            "injectree_active_scope",
            default=None,
        )
        self._build_frame_var: ContextVar[BuildFrame | None] = ContextVar(
            "injectree_build_frame",
            default=None,
        )

    def active_scope(self) -> Scope | None:
        return self._active_scope_var.get()

    def enter_scope(self, scope: Scope) -> Token[Scope | None]:
        return self._active_scope_var.set(scope)

    def exit_scope(self, token: Token[Scope | None]) -> None:
        self._active_scope_var.reset(token)

    def build_frame(self) -> BuildFrame | None:
        return self._build_frame_var.get()

    def begin_build(self, record: ResultRecord, scope: Scope) -> Token[BuildFrame | None]:
        return self._build_frame_var.set(BuildFrame(record=record, scope=scope))

    def suspend_build(self) -> Token[BuildFrame | None]:
        return self._build_frame_var.set(None)

    def end_build(self, token: Token[BuildFrame | None]) -> None:
        self._build_frame_var.reset(token)


resolution_context = ResolutionContext()
