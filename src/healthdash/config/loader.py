"""Locate and load .healthdash.yaml."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from healthdash.config.models import DashboardConfig

CONFIG_FILENAME = ".healthdash.yaml"

# ${VAR} or ${VAR:-fallback}
_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+?)\s*(?::-(?P<fallback>[^}]*))?\}")


def expand_env(data: Any) -> Any:
    """Substitute environment references in every string of a parsed config.

    Unset variables without a fallback are left as written so validation
    reports them verbatim.
    """
    if isinstance(data, dict):
        return {key: expand_env(value) for key, value in data.items()}
    if not isinstance(data, str):
        return data

    def _sub(match: re.Match[str]) -> str:
        name = match.group("name").strip()
        fallback = match.group("fallback")
        if name in os.environ:
            return os.environ[name]
        return match.group(0) if fallback is None else fallback

    return _ENV_REF.sub(_sub, data)


def find_config_file(start: Path | None = None) -> Path | None:
    """Nearest .healthdash.yaml in *start* (default cwd) or one of its parents."""
    here = (start or Path.cwd()).resolve()
    return next(
        (d / CONFIG_FILENAME for d in (here, *here.parents) if (d / CONFIG_FILENAME).is_file()),
        None,
    )


def load_config(path: Path | None = None) -> DashboardConfig:
    """Read *path* (or the nearest config file) into a :class:`DashboardConfig`.

    Raises FileNotFoundError when there is nothing to read and ValueError
    when the file does not validate.
    """
    config_path = path or find_config_file()
    if config_path is None or not config_path.exists():
        raise FileNotFoundError(f"Could not find {CONFIG_FILENAME}. Create one or pass --config.")
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    try:
        return DashboardConfig.model_validate(expand_env(raw))
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc


def load_config_or_default(path: Path | None = None) -> DashboardConfig:
    """Like :func:`load_config`, but an absent file means defaults.

    An explicit *path* that does not exist is still an error.
    """
    if path is None and find_config_file() is None:
        return DashboardConfig()
    return load_config(path)
