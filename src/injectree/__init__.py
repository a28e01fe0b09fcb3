from injectree.exceptions import (
    CyclicDependencyError,
    InjectionError,
    InjectionFailedError,
    InjectreeError,
    InvalidScopeConfigurationError,
    MissingOverrideError,
    NoActiveScopeError,
    NonImplicitConstructibleError,
)
from injectree.inject import (
    InjectionContext,
    get_injection_context,
    get_unsafe_injection_context,
    inject,
    inject_optional,
)
from injectree.lock_mode import LockMode
from injectree.providers import Override, Provider, provide
from injectree.scope import Scope, create_scope, get
from injectree.tokens import Dummy, NamedToken, key, no_implicit_inject

__all__ = [
    "CyclicDependencyError",
    "Dummy",
    "InjectionContext",
    "InjectionError",
    "InjectionFailedError",
    "InjectreeError",
    "InvalidScopeConfigurationError",
    "LockMode",
    "MissingOverrideError",
    "NamedToken",
    "NoActiveScopeError",
    "NonImplicitConstructibleError",
    "Override",
    "Provider",
    "Scope",
    "create_scope",
    "get",
    "get_injection_context",
    "get_unsafe_injection_context",
    "inject",
    "inject_optional",
    "key",
    "no_implicit_inject",
    "provide",
]
