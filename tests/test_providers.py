"""Tests for override builders."""

from __future__ import annotations

import pytest

from injectree import NamedToken, Override, Provider, inject, key, provide
from injectree.scope import create_scope


class Named:
    def __init__(self, label: str) -> None:
        self.label = label


class DefaultNamed(Named):
    def __init__(self) -> None:
        super().__init__("existing")


class TestProvider:
    def test_provide_returns_provider(self) -> None:
        assert isinstance(provide(Named), Provider)

    def test_use_builds_override(self) -> None:
        def factory() -> Named:
            return Named("factory")

        override = provide(Named).use(factory)

        assert override == Override(Named, factory)

    def test_override_is_frozen(self) -> None:
        override = provide(Named).use_value(Named("value"))

        with pytest.raises(AttributeError):
            override.token = DefaultNamed  # type: ignore[misc]


class TestOverrideKinds:
    def test_value_override(self) -> None:
        value = Named("value")
        scope = create_scope([provide(Named).use_value(value)])

        assert scope.get(Named) is value

    def test_factory_override(self) -> None:
        scope = create_scope([provide(Named).use_factory(lambda: Named("factory"))])

        assert scope.get(Named).label == "factory"

    def test_factory_runs_once_per_holder(self) -> None:
        calls: list[int] = []

        def factory() -> Named:
            calls.append(1)
            return Named("factory")

        scope = create_scope([provide(Named).use(factory)])
        child = scope.create_child()

        assert scope.get(Named) is child.get(Named)
        assert len(calls) == 1

    def test_existing_override(self) -> None:
        scope = create_scope([provide(Named).use_existing(DefaultNamed)])

        named = scope.get(Named)

        assert named.label == "existing"
        assert named is scope.get(DefaultNamed)

    def test_named_token_override(self) -> None:
        token: NamedToken[Named] = key("Named")
        scope = create_scope([provide(token).use(lambda: Named("key"))])

        assert scope.get(token).label == "key"

    def test_override_created_directly(self) -> None:
        scope = create_scope([Override(Named, lambda: Named("direct"))])

        assert scope.get(Named).label == "direct"

    def test_factory_may_inject_other_tokens(self) -> None:
        prefix = key("prefix")
        scope = create_scope(
            [
                provide(prefix).use_value("hello"),
                provide(Named).use(lambda: Named(f"{inject(prefix)} world")),
            ],
        )

        assert scope.get(Named).label == "hello world"


class TestExistingChaining:
    def test_existing_overrides_chain_across_scopes(self) -> None:
        first = key("first")
        second = key("second")
        third = key("third")
        fourth = key("fourth")

        parent = create_scope(
            [
                provide(second).use_value(0),
                provide(third).use_existing(fourth),
            ],
        )
        child = create_scope(
            [
                provide(first).use_existing(second),
                provide(fourth).use_value(1),
            ],
            parent=parent,
        )

        assert child.get(first) == 0
        assert child.get(third) == 1

    def test_parent_re_key_resolved_in_child_is_owned_by_child(self) -> None:
        target = key("target")
        alias = key("alias")
        parent = create_scope(
            [provide(alias).use_existing(target), provide(target).use_value("parent")],
        )
        child = create_scope([provide(target).use_value("child")], parent=parent)

        assert child.get(alias) == "child"
        assert parent.get(alias) == "parent"
        assert child.overrides[alias].holder is child
