"""Settings for the virtual mirror (environment driven)."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MirrorSettings(BaseSettings):
    """Runtime settings.

    The core operations take explicit arguments; these values are only
    defaults for the app, the compositor and the plot preview.
    """

    model_config = SettingsConfigDict(env_prefix="VIRTUAL_MIRROR_", env_file=".env", extra="ignore")

    log_level: str = "INFO"

    # Mesh resolution
    lathe_segments: int = Field(default=24, ge=3)
    sphere_segments: int = Field(default=16, ge=4)

    # Fixed-aspect container the placement rectangles refer to (pixels)
    canvas_width: int = Field(default=384, gt=0)
    canvas_height: int = Field(default=512, gt=0)
    background_color: str = "#f1f5f9"


def load_settings() -> MirrorSettings:
    """Load settings from environment and defaults."""
    return MirrorSettings()
