"""
PURPOSE: Release metadata for the signal relay, read from the packaged version.json.
"""

from functools import lru_cache
from importlib import resources
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class VersionInfo(BaseModel):
    """Contents of version.json."""

    model_config = ConfigDict(frozen=True)

    version: str
    codename: str = ""
    updated_at: str = ""
    changelog: List[str] = Field(default_factory=list)


@lru_cache(maxsize=1)
def get_version() -> VersionInfo:
    """
    PURPOSE: Load and cache the release metadata.

    Raises:
        FileNotFoundError: version.json is not installed with the package.
        pydantic.ValidationError: version.json is not valid JSON or lacks "version".
    """
    raw = resources.files("signal_relay").joinpath("version.json").read_text(encoding="utf-8")
    return VersionInfo.model_validate_json(raw)
