"""
Engine settings.

Settings are plain pydantic models with sensible defaults. A JSON file can
override them, either passed explicitly or named by the
``LOSTWORLDS_SETTINGS`` environment variable.
"""

import json
import os
from pathlib import Path

from catchery import log_warning
from pydantic import BaseModel, Field

from lostworlds.core.constants import DEFAULT_HISTORY_LIMIT

SETTINGS_ENV_VAR = "LOSTWORLDS_SETTINGS"


class EngineSettings(BaseModel):
    """Tunable behaviour of the combat engine and its front end."""

    history_limit: int = Field(
        default=DEFAULT_HISTORY_LIMIT,
        ge=1,
        description="How many rolls the roll history keeps.",
    )
    preserve_turn_identity: bool = Field(
        default=True,
        description=(
            "Keep the current turn on the same combatant when the initiative "
            "list is re-sorted, instead of on the same position."
        ),
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level name used by the terminal front end.",
    )


def load_settings(path: Path | str | None = None) -> EngineSettings:
    """
    Loads the engine settings.

    Args:
        path (Path | str | None):
            The JSON file to read. When omitted, the file named by the
            LOSTWORLDS_SETTINGS environment variable is used, if any.

    Returns:
        EngineSettings:
            The loaded settings, or the defaults when there is no file.

    Raises:
        pydantic.ValidationError: If the file contains invalid values.

    """
    if path is None:
        env_path = os.environ.get(SETTINGS_ENV_VAR)
        if not env_path:
            return EngineSettings()
        path = env_path

    settings_path = Path(path)
    if not settings_path.is_file():
        log_warning(
            f"Settings file '{settings_path}' not found, using defaults.",
            {"path": str(settings_path)},
        )
        return EngineSettings()

    with settings_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    return EngineSettings.model_validate(data)
