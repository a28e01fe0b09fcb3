from __future__ import annotations

import inspect
import types
from typing import Any, TypeGuard

_ARGUMENT_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def required_argument_names(cls: type[Any]) -> tuple[str, ...]:
    """Return constructor parameters of ``cls`` that have no default.

    Classes whose signature cannot be inspected report no required
    arguments; calling them surfaces the real error.

    Args:
        cls: Class about to be constructed without arguments.

    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return ()
    return tuple(
        name
        for name, parameter in signature.parameters.items()
        if parameter.kind in _ARGUMENT_KINDS and parameter.default is inspect.Parameter.empty
    )


__all__ = ["is_runtime_class", "required_argument_names"]
