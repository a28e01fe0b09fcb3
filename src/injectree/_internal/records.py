from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from injectree.scope import Scope


@dataclass(eq=False, slots=True)
class ResultRecord:
    """Internal recipe for one token, held by one scope.

    ``dependencies`` is ``None`` until the record is built. A built record
    always carries ``value`` and the list of built records consumed while
    producing it.
    """

    token: Any
    factory: Callable[[], Any]
    holder: Scope
    value: Any = None
    dependencies: list[ResultRecord] | None = None

    @property
    def is_built(self) -> bool:
        return self.dependencies is not None

    def snapshot(self, holder: Scope | None = None) -> ResultRecord:
        """Return a fresh unbuilt copy ready to record dependencies."""
        return ResultRecord(
            token=self.token,
            factory=self.factory,
            holder=self.holder if holder is None else holder,
            dependencies=[],
        )


def more_specific(first: Scope, second: Scope) -> Scope:
    """Return whichever of two scopes on one chain sits deeper."""
    return first if first.rank > second.rank else second
