"""Configuration loading with precedence resolution.

fluentreq reads an optional configuration file describing request
defaults and codec options (see :class:`~fluentreq.models.ClientConfig`).
:func:`load_config` resolves where it comes from.

Precedence (high to low):
    1. An explicit ``path`` argument
    2. The ``FLUENTREQ_CONFIG`` environment variable
    3. Project config in the working directory (``fluentreq.json``,
       ``fluentreq.yaml`` or ``fluentreq.yml``)
    4. Defaults

On top of the file, the ``FLUENTREQ_TIMEOUT`` and ``FLUENTREQ_VERIFY_SSL``
environment variables override the request defaults.

:func:`configure_registry` turns the codec settings into registered
codecs and :func:`bootstrap` wires everything into the process-wide
defaults exactly once.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from fluentreq import mime
from fluentreq.codecs import CsvCodec, JsonCodec, XmlCodec, YamlCodec
from fluentreq.exceptions import ConfigError
from fluentreq.models import ClientConfig
from fluentreq.registry import MimeRegistry, default_registry

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FLUENTREQ_CONFIG"
_PROJECT_CONFIG_FILENAMES = ("fluentreq.json", "fluentreq.yaml", "fluentreq.yml")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- File loading ---


def _parse_content(content: str, path: Path) -> dict[str, Any]:
    """Parse *content* as JSON or YAML, choosing by the file extension."""
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a mapping, got {type(data).__name__}")
    return data


def _find_config_file(path: Optional[str | Path]) -> Optional[Path]:
    if path is not None:
        candidate = Path(path)
        if not candidate.is_file():
            raise ConfigError(f"Config file not found: {candidate}")
        return candidate

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        if not candidate.is_file():
            raise ConfigError(f"{CONFIG_ENV_VAR} points to a missing file: {candidate}")
        return candidate

    for name in _PROJECT_CONFIG_FILENAMES:
        candidate = Path.cwd() / name
        if candidate.is_file():
            return candidate
    return None


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _apply_env_overrides(config: ClientConfig) -> ClientConfig:
    timeout = os.environ.get("FLUENTREQ_TIMEOUT")
    if timeout:
        try:
            config.request.timeout = float(timeout)
        except ValueError as exc:
            raise ConfigError(f"FLUENTREQ_TIMEOUT must be a number, got {timeout!r}") from exc

    verify = os.environ.get("FLUENTREQ_VERIFY_SSL")
    if verify:
        config.request.verify_ssl = _parse_bool("FLUENTREQ_VERIFY_SSL", verify)
    return config


def load_config(path: Optional[str | Path] = None) -> ClientConfig:
    """Load the library configuration.

    Args:
        path: Explicit config file.  When omitted, ``FLUENTREQ_CONFIG`` and
            then the project config files in the working directory are
            tried.

    Returns:
        The resolved :class:`~fluentreq.models.ClientConfig`.  Defaults
        are returned when no file is found.

    Raises:
        ConfigError: If a named file is missing, or a file holds invalid
            JSON/YAML or fails validation.
    """
    config_path = _find_config_file(path)
    if config_path is None:
        return _apply_env_overrides(ClientConfig())

    logger.debug("Loading config from %s", config_path)
    data = _parse_content(config_path.read_text(encoding="utf-8"), config_path)
    try:
        config = ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc
    return _apply_env_overrides(config)


# --- Registry wiring ---


def configure_registry(config: ClientConfig, registry: MimeRegistry) -> list[str]:
    """Register codecs built from ``config.codecs`` in *registry*.

    Only settings that differ from the codec defaults produce a
    registration, and existing entries are never replaced.  Call this
    before :meth:`~fluentreq.registry.MimeRegistry.install_builtin_codecs`
    so the configured codecs win over the built-in ones.

    Returns:
        The MIME types that were registered.
    """
    settings = config.codecs
    candidates = []
    if not settings.json_decode_as_dict:
        candidates.append((mime.JSON, JsonCodec(decode_as_dict=False)))
    if settings.xml_namespace or settings.xml_parser_options:
        candidates.append(
            (mime.XML, XmlCodec(settings.xml_namespace, settings.xml_parser_options))
        )
    if settings.csv_as_records:
        candidates.append((mime.CSV, CsvCodec(as_records=True)))
    if settings.enable_yaml:
        candidates.append((mime.YAML, YamlCodec()))

    registered = []
    for mime_type, codec in candidates:
        if registry.register_if_absent(mime_type, codec):
            registered.append(mime_type)
        else:
            logger.warning("Codec for %s already registered; ignoring configured %r", mime_type, codec)
    return registered


# --- Process-wide bootstrap ---

_config: Optional[ClientConfig] = None
_bootstrap_lock = threading.Lock()


def get_config() -> ClientConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ClientConfig) -> None:
    """Install *config* as the process-wide configuration."""
    global _config
    _config = config


def reset_config() -> None:
    """Forget the process-wide configuration so the next use reloads it."""
    global _config
    _config = None


def bootstrap() -> None:
    """Prepare :data:`~fluentreq.registry.default_registry`.

    Registers codecs from the configuration and then the built-in
    codecs.  Safe to call from every entry point: the built-in step runs
    once and configured codecs are only added where nothing is registered.
    """
    with _bootstrap_lock:
        if default_registry.builtins_installed:
            return
        configure_registry(get_config(), default_registry)
        default_registry.install_builtin_codecs()
