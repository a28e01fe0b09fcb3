"""Tests for lock modes of scope hierarchies."""

import threading
import time
from contextlib import nullcontext

from injectree import LockMode, inject
from injectree.scope import Scope, create_scope


class SlowService:
    instances = 0

    def __init__(self) -> None:
        time.sleep(0.01)
        type(self).instances += 1


class UsesSlowService:
    def __init__(self) -> None:
        self.service = inject(SlowService)


class TestLockMode:
    def test_default_mode_has_no_lock(self, root_scope: Scope) -> None:
        assert isinstance(root_scope.guarded(), nullcontext)

    def test_children_share_root_lock(self) -> None:
        root = create_scope(lock_mode=LockMode.THREAD)
        grandchild = root.create_child().create_child()

        assert grandchild.guarded() is root.guarded()

    def test_explicit_none_mode(self) -> None:
        root = create_scope(lock_mode=LockMode.NONE)

        assert isinstance(root.guarded(), nullcontext)


class TestConcurrentResolution:
    def test_concurrent_resolution_builds_one_instance(self) -> None:
        """Threads resolving through different scopes of one locked hierarchy share the singleton."""
        SlowService.instances = 0
        root = create_scope(lock_mode=LockMode.THREAD)
        scopes = [root.create_child() for _ in range(5)]
        results: list[UsesSlowService] = []
        errors: list[Exception] = []

        def resolve_service(scope: Scope) -> None:
            try:
                results.append(scope.get(UsesSlowService))
            except Exception as e:
                errors.append(e)

        threads = [
            threading.Thread(target=resolve_service, args=(scopes[index % len(scopes)],))
            for index in range(10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(results) == 10
        assert all(r is results[0] for r in results)
        assert SlowService.instances == 1

    def test_resolution_state_is_isolated_per_thread(self) -> None:
        """A thread starting a resolution does not see another thread's in-flight chain."""
        root = create_scope()
        started = threading.Event()
        release = threading.Event()
        errors: list[Exception] = []

        class Blocking:
            def __init__(self) -> None:
                started.set()
                release.wait(timeout=5)

        class Independent:
            pass

        def resolve_blocking() -> None:
            try:
                root.get(Blocking)
            except Exception as e:
                errors.append(e)

        worker = threading.Thread(target=resolve_blocking)
        worker.start()
        started.wait(timeout=5)
        try:
            independent = root.get(Independent)
        finally:
            release.set()
            worker.join()

        assert not errors
        assert root.overrides[Independent].dependencies == []
        assert root.get(Independent) is independent
