from __future__ import annotations

from contextvars import ContextVar
from typing import Any

from injectree.exceptions import CyclicDependencyError


class CycleGuard:
    """Track tokens currently being resolved on the active call chain.

    The chain spans scope boundaries, since a factory in one scope can
    request tokens that are built by another. State lives in a context
    variable so each thread or task sees its own chain.
    """

    __slots__ = ("_chain_var",)

    def __init__(self) -> None:
        self._chain_var: ContextVar[tuple[Any, ...]] = ContextVar(
            "injectree_cycle_guard_chain",
            default=(),
        )

    def push(self, token: Any) -> None:
        """Start tracking ``token``.

        Args:
            token: Token about to be resolved.

        Raises:
            CyclicDependencyError: If ``token`` is already in flight.

        """
        chain = self._chain_var.get()
        if token in chain:
            raise CyclicDependencyError(token, trace=(*chain, token))
        self._chain_var.set((*chain, token))

    def pop(self) -> None:
        chain = self._chain_var.get()
        if chain:
            self._chain_var.set(chain[:-1])

    def chain(self) -> tuple[Any, ...]:
        """Return the in-flight tokens, outermost first."""
        return self._chain_var.get()


cycle_guard = CycleGuard()
