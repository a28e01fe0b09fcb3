from __future__ import annotations

import datetime
import decimal
import inspect
import pathlib
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeGuard

from injectree._internal.type_checks import is_runtime_class, required_argument_names
from injectree.tokens import INJECT_FACTORY_ATTR, forbids_implicit_inject


@dataclass(frozen=True, slots=True)
class ImplicitConstructionPolicy:
    """Internal policy deciding which tokens the root scope may build on its own."""

    ignored_base_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.datetime,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
    )

    def is_eligible(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true when a token may be constructed without an override.

        Args:
            candidate: Token reaching the root scope without a matching override.

        """
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ == "builtins":
            return False
        if inspect.isabstract(candidate):
            return False
        if issubclass(candidate, type):
            return False
        if forbids_implicit_inject(candidate):
            return False
        return not issubclass(candidate, self.ignored_base_types)

    def factory_for(self, cls: type[Any]) -> Callable[[], Any] | None:
        """Return the zero-argument factory for ``cls``, or ``None`` if it needs arguments.

        Args:
            cls: Eligible class, see ``is_eligible``.

        """
        # The hook belongs to the class that declares it; subclasses build themselves.
        if INJECT_FACTORY_ATTR in vars(cls):
            hook = getattr(cls, INJECT_FACTORY_ATTR)
            if callable(hook):
                return hook
        if required_argument_names(cls):
            return None
        return cls


implicit_construction_policy = ImplicitConstructionPolicy()
