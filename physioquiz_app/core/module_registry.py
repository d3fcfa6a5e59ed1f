"""Utilities for declaratively registering application modules.

The registry allows each blueprint/module to be described with metadata so that
module discovery and registration can be automated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """Describe how a blueprint-backed module is registered with the app."""

    import_path: str
    attribute: str
    url_prefix: Optional[str] = None
    version: str = "1.0"

    def load_blueprint(self) -> Blueprint:
        """Import and return the blueprint described by this definition."""

        module = import_string(self.import_path)
        blueprint = getattr(module, self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                "Expected attribute '%s' in '%s' to be a Flask Blueprint, got %r instead"
                % (self.attribute, self.import_path, type(blueprint))
            )
        return blueprint


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> None:
    """Register all modules in the provided iterable with the Flask app."""

    for module in modules:
        blueprint = module.load_blueprint()
        app.register_blueprint(blueprint, url_prefix=module.url_prefix)
        app.logger.debug(
            "Registered module %s (version %s) at prefix %s",
            module.import_path,
            module.version,
            module.url_prefix or "<root>",
        )


def register_default_modules(app: Flask) -> None:
    """Convenience helper that registers the built-in PhysioQuiz modules."""

    register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Iterable[ModuleDefinition] = (
    ModuleDefinition("physioquiz_app.modules.auth", "auth_bp", url_prefix="/auth", version="1.0"),
    ModuleDefinition("physioquiz_app.modules.quiz", "quiz_bp", version="1.0"),
    ModuleDefinition("physioquiz_app.modules.quiz", "quiz_api_bp", url_prefix="/api/quiz", version="1.0"),
    ModuleDefinition("physioquiz_app.modules.leaderboard", "leaderboard_bp", url_prefix="/leaderboard", version="1.0"),
    ModuleDefinition("physioquiz_app.modules.admin", "admin_bp", url_prefix="/admin", version="1.0"),
    ModuleDefinition("physioquiz_app.modules.realtime", "realtime_bp", url_prefix="/api/realtime", version="1.0"),
)
