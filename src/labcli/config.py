"""Configuration helpers for lab.

This module reads ``config.json`` from the user config directory, validates it
with the ``LabConfig`` Pydantic model, and applies environment overrides.

Example:
    >>> from labcli.config import config_path
    >>> config_path().name
    'config.json'
"""

import json
import os
from pathlib import Path
from typing import Mapping

from platformdirs import user_config_dir
from pydantic import ValidationError

from .models import LabConfig
from .services.errors import ValidationFailedError

LAB_APP_NAME = "lab"
CONFIG_FILENAME = "config.json"

ENV_OVERRIDES = {
    "LAB_CORE_HOST": "host",
    "LAB_CORE_TOKEN": "token",
    "LAB_CORE_USER": "user",
    "LAB_DEFAULT_REMOTE": "default_remote",
    "LAB_GIT_PATH": "git_path",
}


def config_dir() -> Path:
    """Return the lab user config directory.

    ``LAB_CONFIG_DIR`` takes precedence over the platform default.
    """
    override = os.environ.get("LAB_CONFIG_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(LAB_APP_NAME))


def config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def load_json(path: Path) -> dict | None:
    """Load a JSON file if it exists.

    Args:
        path: Path to the JSON file.

    Returns:
        Parsed payload as a dict, or ``None`` if the file does not exist.

    Example:
        >>> from pathlib import Path
        >>> load_json(Path("missing.json")) is None
        True
    """
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _env_payload(environ: Mapping[str, str]) -> dict[str, str]:
    payload: dict[str, str] = {}
    for env_name, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is not None and value.strip():
            payload[field_name] = value.strip()
    return payload


def load_config(
    path: Path | None = None, *, environ: Mapping[str, str] | None = None
) -> LabConfig:
    """Load lab config from disk and the environment.

    Environment variables win over file values. A missing file yields the
    defaults.

    Args:
        path: Config file path; defaults to ``config_path()``.
        environ: Environment mapping; defaults to ``os.environ``.

    Returns:
        Validated ``LabConfig``.

    Raises:
        ValidationFailedError: The file is not valid JSON or fails validation.
    """
    target = path or config_path()
    env = os.environ if environ is None else environ
    try:
        payload = load_json(target) or {}
    except json.JSONDecodeError as exc:
        raise ValidationFailedError(f"invalid JSON in {target}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValidationFailedError(f"config must be a JSON object: {target}")
    merged = {**payload, **_env_payload(env)}
    try:
        return LabConfig.model_validate(merged)
    except ValidationError as exc:
        raise ValidationFailedError(
            f"invalid lab config in {target}: {exc}",
            recovery_hint=f"fix or remove {target}",
        ) from exc
