"""Application factory for the Price Estimator service."""

from __future__ import annotations

import copy
import importlib
import pkgutil
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml
from flask import Flask, url_for

from common.errors import AppError, InternalAppError, NotFoundAppError, ValidationAppError
from common.logging import install_request_logging, set_level
from common.responses import fail, ok

from . import config as config_module
from .blueprints import register_plugin_blueprints

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yml"


def _load_yaml_config(path: Path = CONFIG_PATH) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _merge_settings(defaults: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(dict(defaults))
    for key, value in (overrides or {}).items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge_settings(merged[key], value)
        else:
            merged[key] = value
    return merged


def _discover_plugins(package: str = "plugins") -> Iterable[str]:
    """Yield import paths for all plugin packages."""

    package_path = Path(__file__).resolve().parent.parent / package
    if not package_path.exists():
        return []
    for module_info in pkgutil.iter_modules([str(package_path)]):
        if module_info.ispkg:
            yield f"{package}.{module_info.name}"


def _load_manifests() -> list[dict[str, str]]:
    manifests: list[dict[str, str]] = []
    for dotted in _discover_plugins():
        module = importlib.import_module(dotted)
        manifest = getattr(module, "manifest", None)
        if manifest:
            manifests.append(dict(manifest))
    manifests.sort(key=lambda item: item["title"].lower())
    return manifests


def create_app(config_name: str | None = None, *, config_path: Path | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    app.config.from_object(config_module.BaseConfig)
    if config_name:
        config_obj = getattr(config_module, config_name, None)
        if config_obj is None:
            raise ValueError(f"Unknown configuration '{config_name}'")
        app.config.from_object(config_obj)

    yaml_config = _load_yaml_config(config_path or CONFIG_PATH)
    site_settings = yaml_config.get("site", {}) or {}
    app.config["SITE_SETTINGS"] = site_settings
    if "max_content_length_mb" in site_settings:
        try:
            max_bytes = int(float(site_settings["max_content_length_mb"]) * 1024 * 1024)
            app.config["MAX_CONTENT_LENGTH"] = max_bytes
        except (TypeError, ValueError):
            pass
    if site_settings.get("log_level"):
        app.config["LOG_LEVEL"] = site_settings["log_level"]

    app.config["PLUGIN_SETTINGS"] = _merge_settings(
        app.config.get("PLUGIN_DEFAULTS", {}), yaml_config.get("plugins", {}) or {}
    )

    set_level(app.config["LOG_LEVEL"])
    install_request_logging(app)
    register_plugin_blueprints(app)

    manifests = _load_manifests()
    for manifest in manifests:
        blueprint = manifest.get("blueprint")
        plugin_config = app.config["PLUGIN_SETTINGS"].get(blueprint, {}) if blueprint else {}
        if plugin_config.get("summary"):
            manifest["summary"] = plugin_config["summary"]
    app.config["PLUGIN_MANIFESTS"] = manifests

    @app.after_request
    def apply_response_headers(response):
        """Attach strict security headers to every outgoing response."""

        configured = app.config.get("RESPONSE_HEADERS", {})
        for header, value in configured.items():
            if header not in response.headers:
                response.headers[header] = value
        return response

    @app.route("/")
    def home():
        plugins = []
        for manifest in app.config.get("PLUGIN_MANIFESTS", []):
            entry = dict(manifest)
            blueprint = entry.get("blueprint")
            if blueprint and f"{blueprint}.index" in app.view_functions:
                entry["href"] = url_for(f"{blueprint}.index")
            plugins.append(entry)
        return ok({"site": app.config.get("SITE_SETTINGS", {}), "plugins": plugins})

    @app.errorhandler(400)
    def bad_request(error):  # pragma: no cover - simple envelope
        return fail(ValidationAppError(message="Bad request", code="bad_request"))

    @app.errorhandler(404)
    def not_found(error):
        return fail(NotFoundAppError(message="Resource not found"))

    @app.errorhandler(413)
    def payload_too_large(error):
        return fail(AppError(message="Upload exceeds the allowed size", code="payload_too_large", status_code=413))

    @app.errorhandler(500)
    def server_error(error):  # pragma: no cover
        return fail(InternalAppError(message="Internal server error"))

    return app


__all__ = ["create_app"]
