# Overview: Flask extension holding the application's entity stores.

from __future__ import annotations

from flask import Flask, current_app

from .services.store_service import StoreRegistry

EXTENSION_KEY = "dishooom.stores"


class DataStores:
    """
    Flask extension in the init_app style: the registry itself lives in
    app.extensions, so each application (and each test app) gets its own
    stores while handlers share one instance per process.
    """

    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> StoreRegistry:
        registry = StoreRegistry.create(latency_ms=app.config.get("STORE_LATENCY_MS", 0))
        if app.config.get("SEED_ON_STARTUP", True):
            registry.load_seed_dir(app.config["SEED_DIR"])
        app.extensions[EXTENSION_KEY] = registry
        return registry

    @property
    def registry(self) -> StoreRegistry:
        return current_app.extensions[EXTENSION_KEY]

    def __getattr__(self, name: str):
        # stores.products, stores.customers, ... resolve against the current app
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.registry, name)


stores = DataStores()
