"""Quickstart: lazy singletons built from zero-argument classes.

Resolve only the top-level service; every class it injects is built once
and shared by the whole scope tree.
"""

from __future__ import annotations

from injectree import create_scope, inject


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self) -> None:
        self.database = inject(Database)


class UserService:
    def __init__(self) -> None:
        self.repository = inject(UserRepository)


def main() -> None:
    root = create_scope()
    service = root.get(UserService)

    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database
    print(f"same_service={root.get(UserService) is service}")  # => same_service=True


if __name__ == "__main__":
    main()
