"""Runtime settings read from the environment (and an optional ``.env`` file)."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

ENV_PREFIX = "ROUTE_INDEX_"


class Settings(BaseModel):
    photon_url: str | None = None
    nominatim_url: str | None = None
    marker_interval: float = 1000.0
    ellps: str | None = None
    log_level: str = "INFO"

    @field_validator("marker_interval")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("marker_interval must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def photon_enabled(self) -> bool:
        """Photon is used when a usable endpoint is configured."""
        return bool(self.photon_url) and self.photon_url != "null"


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``ROUTE_INDEX_*`` variables.

    Reads ``os.environ`` (after loading ``.env``) unless ``env`` is given.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    values = {}
    for field in Settings.model_fields:
        key = ENV_PREFIX + field.upper()
        if key in env and env[key] != "":
            values[field] = env[key]
    return Settings(**values)


def configure_logging(level: str) -> None:
    """Send ``route_index`` log records to stderr at ``level``."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("route_index").setLevel(level)
