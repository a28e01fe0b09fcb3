"""Shared pytest fixtures for injectree tests."""

import pytest

from injectree.scope import Scope, create_scope


@pytest.fixture()
def root_scope() -> Scope:
    """Root scope without overrides."""
    return create_scope()
