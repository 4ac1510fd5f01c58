"""Transform settings loaded from fastcwt.toml.

Example file:

    [transform]
    bandwidth = 2.0
    normalize = true
    threads = 8
    padding = "pow2"     # or "fast"
    fft_workers = 1

Lookup order: explicit path, FASTCWT_CONFIG, ./fastcwt.toml,
~/fastcwt.toml. Without a file the defaults below apply.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Literal, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

from fastcwt.errors import InvalidParameter

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "FASTCWT_CONFIG"
CONFIG_FILENAME = "fastcwt.toml"


class TransformSettings(BaseModel):
    """Defaults for TransformContext and fastcwt.cwt().

    Attributes:
        bandwidth: Morlet bandwidth (shape parameter)
        normalize: Calibrate rows so a tone's magnitude equals its amplitude
        threads: Filter-bank worker threads (None: CPU count)
        padding: Padding policy, 'pow2' or 'fast'
        fft_workers: Threads scipy.fft may use for the forward transform
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    bandwidth: float = Field(default=2.0, gt=0.0, allow_inf_nan=False)
    normalize: bool = True
    threads: int | None = Field(default=None, ge=1)
    padding: Literal["pow2", "fast"] = "pow2"
    fft_workers: int = Field(default=1, ge=1)


def resolve_config_path(config_path: str | None = None) -> str | None:
    """Resolve the settings file from explicit path, env, or defaults.

    Returns None when no file is configured and none exists in the
    default locations.

    Raises:
        FileNotFoundError: If an explicit or env path does not exist
    """
    for source, candidate in (
        ("argument", config_path),
        (CONFIG_ENV_VAR, os.environ.get(CONFIG_ENV_VAR)),
    ):
        if candidate:
            if not os.path.exists(candidate):
                raise FileNotFoundError(f"Config file not found at {candidate} (from {source})")
            return candidate

    for candidate in (CONFIG_FILENAME, os.path.expanduser(f"~/{CONFIG_FILENAME}")):
        if os.path.exists(candidate):
            return candidate
    return None


def load_settings(config_path: str | None = None) -> TransformSettings:
    """Load TransformSettings from the [transform] table of a TOML file.

    Raises:
        FileNotFoundError: If an explicit or env path does not exist
        InvalidParameter: If the file holds invalid values
    """
    resolved_path = resolve_config_path(config_path)
    if resolved_path is None:
        logger.debug("No %s found, using default settings", CONFIG_FILENAME)
        return TransformSettings()

    with open(resolved_path, "rb") as f:
        config = cast(dict[str, Any], tomllib.load(f))

    section = config.get("transform", {})
    if not isinstance(section, dict):
        raise InvalidParameter(f"[transform] in {resolved_path} must be a table")
    try:
        settings = TransformSettings(**section)
    except ValidationError as e:
        raise InvalidParameter(f"Invalid settings in {resolved_path}: {e}") from e

    logger.debug("Loaded settings from %s: %s", resolved_path, settings)
    return settings
