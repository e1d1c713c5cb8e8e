"""Chargement de la configuration : CLI > variables d'environnement > fichier TOML > défauts."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

from l2ldispatch.core.models import DemoConfig
from l2ldispatch.core.utils.dates import site_now

API_KEY_ENV = "L2L_API_KEY"
SERVER_ENV = "L2L_SERVER"

_REQUIRED = ("server", "site", "user", "api_key")


class ConfigError(ValueError):
    """Configuration incomplète ou invalide."""


def read_toml(path: Path) -> dict[str, Any]:
    """Lit un fichier TOML (stdlib tomllib en 3.11+)."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore
    try:
        with open(path, "rb") as file_obj:
            return tomllib.load(file_obj)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if environ.get(API_KEY_ENV):
        values["api_key"] = environ[API_KEY_ENV]
    if environ.get(SERVER_ENV):
        values["server"] = environ[SERVER_ENV]
    return values


def build_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DemoConfig:
    """
    Fusionne les sources de configuration et construit un DemoConfig.

    La clé API ne doit pas être codée en dur : préférer la variable
    d'environnement L2L_API_KEY à l'argument en ligne de commande.

    Raises:
        ConfigError: fichier illisible, clé inconnue ou valeur requise manquante.
    """
    merged: dict[str, Any] = {}
    if config_path is not None:
        data = read_toml(Path(config_path))
        # Les clés peuvent être à la racine ou dans une table [dispatch]
        section = data.get("dispatch", data)
        if not isinstance(section, dict):
            raise ConfigError("[dispatch] must be a table")
        merged.update(section)
    merged.update(_from_env(os.environ if environ is None else environ))
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    known = set(DemoConfig.__dataclass_fields__)
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")
    missing = [key for key in _REQUIRED if not str(merged.get(key) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")
    if "timeout_s" in merged:
        try:
            merged["timeout_s"] = float(merged["timeout_s"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"timeout_s must be a number, got {merged['timeout_s']!r}") from e
        if merged["timeout_s"] <= 0:
            raise ConfigError("timeout_s must be > 0")
    if "area_page_size" in merged:
        value = merged["area_page_size"]
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigError(f"area_page_size must be an integer >= 1, got {value!r}")
    if merged.get("timezone"):
        try:
            site_now(merged["timezone"])
        except ValueError as e:
            raise ConfigError(str(e)) from e
    return DemoConfig(**merged)
