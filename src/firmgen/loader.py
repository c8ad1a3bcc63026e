"""YAML device descriptions → :class:`~firmgen.model.Configuration`.

Documents are read with PyYAML's safe loader.  ``!secret name`` is
replaced by ``name``'s value from a secrets mapping (for files, the
``secrets.yaml`` next to the document).  Schema problems are left to
pydantic and surface as ``pydantic.ValidationError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from firmgen.errors import ConfigurationLoadError
from firmgen.model import Configuration

logger = logging.getLogger(__name__)

SECRETS_FILE = "secrets.yaml"


class _Secret(str):
    """Placeholder for a ``!secret`` reference until substitution."""


class _ConfigLoader(yaml.SafeLoader):
    pass


def _secret_constructor(loader: yaml.SafeLoader, node: yaml.Node) -> _Secret:
    return _Secret(loader.construct_scalar(node))


_ConfigLoader.add_constructor("!secret", _secret_constructor)


def _substitute(data: Any, secrets: Mapping[str, Any]) -> Any:
    if isinstance(data, _Secret):
        name = str(data)
        if name not in secrets:
            raise ConfigurationLoadError(f"Unknown secret '{name}'")
        return secrets[name]
    if isinstance(data, dict):
        return {k: _substitute(v, secrets) for k, v in data.items()}
    if isinstance(data, list):
        return [_substitute(v, secrets) for v in data]
    return data


def _load_yaml(text: str, source: str) -> Any:
    try:
        return yaml.load(text, Loader=_ConfigLoader)
    except yaml.YAMLError as e:
        raise ConfigurationLoadError(f"YAML parsing error in {source}: {e}") from e


def parse_configuration(
    text: str,
    secrets: Mapping[str, Any] | None = None,
    *,
    source: str = "<string>",
) -> Configuration:
    """Parse a YAML document into a validated Configuration."""
    data = _load_yaml(text, source)
    if not isinstance(data, dict):
        raise ConfigurationLoadError(
            f"{source}: expected a mapping at the top level, got {type(data).__name__}"
        )
    data = _substitute(data, secrets or {})
    return Configuration.model_validate(data)


def load_secrets(path: str | Path) -> dict[str, Any]:
    """Read a secrets file; a missing file yields no secrets."""
    path = Path(path)
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationLoadError(f"YAML parsing error in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationLoadError(f"{path}: secrets must be a mapping")
    return data


def load_configuration(
    path: str | Path,
    secrets: Mapping[str, Any] | None = None,
) -> Configuration:
    """Read and validate the configuration file at *path*.

    Without an explicit *secrets* mapping, ``secrets.yaml`` beside the file
    is used when present.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationLoadError(f"Configuration file not found: {path}") from None
    except OSError as e:
        raise ConfigurationLoadError(f"Cannot read {path}: {e}") from e

    if secrets is None:
        secrets = load_secrets(path.parent / SECRETS_FILE)
    logger.info("Loading configuration from %s", path)
    return parse_configuration(text, secrets, source=str(path))
