"""Errors: every resolution failure carries the injection path.

A named token without an override fails with the full chain of tokens that
led to it.
"""

from __future__ import annotations

from injectree import MissingOverrideError, create_scope, inject, key

DatabaseUrl = key("DatabaseUrl")


class Engine:
    def __init__(self) -> None:
        self.url = inject(DatabaseUrl)


class Repository:
    def __init__(self) -> None:
        self.engine = inject(Engine)


def main() -> None:
    root = create_scope()
    try:
        root.get(Repository)
    except MissingOverrideError as error:
        print(error)  # => Failed to inject (Repository -> Engine -> DatabaseUrl): Missing explicit override for DatabaseUrl.


if __name__ == "__main__":
    main()
