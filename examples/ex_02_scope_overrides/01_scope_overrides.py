"""Scope overrides: rebuild only what an override actually touches.

A request scope overrides the current user. Services depending on the user
are rebuilt for that request, while everything else stays shared with the
application scope.
"""

from __future__ import annotations

from injectree import create_scope, inject, key, provide

CurrentUser = key("CurrentUser")


class Settings:
    def __init__(self) -> None:
        self.greeting = "hello"


class Greeter:
    def __init__(self) -> None:
        self.settings = inject(Settings)
        self.user = inject(CurrentUser)

    def greet(self) -> str:
        return f"{self.settings.greeting}, {self.user}"


def main() -> None:
    app = create_scope([provide(CurrentUser).use_value("anonymous")])
    alice = app.create_child([provide(CurrentUser).use_value("alice")])
    bob = app.create_child([provide(CurrentUser).use_value("bob")])

    print(app.get(Greeter).greet())  # => hello, anonymous
    print(alice.get(Greeter).greet())  # => hello, alice
    print(bob.get(Greeter).greet())  # => hello, bob

    shared = alice.get(Greeter).settings is bob.get(Greeter).settings
    print(f"settings_shared={shared}")  # => settings_shared=True
    print(f"greeter_shared={alice.get(Greeter) is bob.get(Greeter)}")  # => greeter_shared=False


if __name__ == "__main__":
    main()
