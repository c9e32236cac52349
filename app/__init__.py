"""HTTP surface, configuration and window helpers for the phrase engine."""

from importlib import import_module
from typing import Any


def create_app(*args: Any, **kwargs: Any):
    # fastapi is only imported when the API is actually built
    module = import_module("app.main")
    return module.create_app(*args, **kwargs)


__all__ = ["create_app"]
