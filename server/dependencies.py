"""FastAPI dependency factories."""

import threading
from functools import lru_cache

from fastapi import Depends, Request

from server.config import Settings
from server.runtime import Runtime, build_runtime

_runtime_lock = threading.Lock()


@lru_cache()
def get_settings() -> Settings:
    """Singleton Settings -- override via app.dependency_overrides in tests."""
    return Settings()


def get_runtime(request: Request, settings: Settings = Depends(get_settings)) -> Runtime:
    """
    The Runtime held on app.state.

    Normally built by the lifespan at startup. Built here on first use when
    missing or when settings were overridden (e.g. in tests).
    """
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is not None and runtime.settings is settings:
        return runtime
    with _runtime_lock:
        runtime = getattr(request.app.state, "runtime", None)
        if runtime is None or runtime.settings is not settings:
            runtime = build_runtime(settings)
            request.app.state.runtime = runtime
    return runtime
