"""Model Registry - name -> model lookup gated behind a one-shot boot signal.

Invariants:
    - lookup() before boot() raises RuntimeError: names are resolvable only after boot
    - boot() runs hooks exactly once, in registration order; later calls are no-ops
    - Hooks registered after boot are never run

Design Decisions:
    - Explicit instance per application (or per test): no module-level registry
"""

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

BootHook = Callable[["ModelRegistry"], Any]


class ModelRegistry:
    """Registry of model classes by name with a boot signal."""

    def __init__(self):
        self._models: dict[str, type] = {}
        self._boot_hooks: list[BootHook] = []
        self._booted = False

    @property
    def booted(self) -> bool:
        return self._booted

    def add(self, model: type, name: str | None = None) -> type:
        """Register model under name (default: class name). Returns the model."""
        key = name or model.__name__
        if key in self._models and self._models[key] is not model:
            logger.warning(f"Model name {key!r} re-registered with a different class")
        self._models[key] = model
        return model

    def lookup(self, name: str) -> type | None:
        if not self._booted:
            raise RuntimeError(f"Model registry not booted; cannot resolve {name!r}")
        return self._models.get(name)

    def on_boot(self, hook: BootHook) -> None:
        if self._booted:
            logger.warning("Boot hook registered after boot; it will not run")
        self._boot_hooks.append(hook)

    def boot(self) -> None:
        """Fire the boot signal."""
        if self._booted:
            logger.warning("Model registry already booted")
            return
        self._booted = True
        logger.info(f"Model registry booted with {len(self._models)} model(s)")
        for hook in self._boot_hooks:
            hook(self)
