"""Prepper-backed configuration loader for braillegcode."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.loaders import _parse_file, _path_to_source, discover_file_paths
from prepper.merge import merge_layer
from prepper.provenance import ProvenanceRecorder

from .errors import ConfigurationError
from .structures import DeviceGeometry

APP_NAME = "Braillegcode"

LANGUAGE_ALIASES = {
    "6dots": "6 dots",
    "6_dots": "6 dots",
    "6-dots": "6 dots",
    "six dots": "6 dots",
    "8dots": "8 dots",
    "8_dots": "8 dots",
    "8-dots": "8 dots",
    "eight dots": "8 dots",
    "french": "French 6 dots",
    "french 6 dots": "French 6 dots",
}


class BraillegcodeConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    BRAILLE_PAPER_WIDTH: float = Field(default=170.0, description="Sheet width in mm.")
    BRAILLE_PAPER_HEIGHT: float = Field(default=125.0, description="Sheet height in mm.")
    BRAILLE_MARGIN_WIDTH: float = Field(default=20.0, description="Left/right margin in mm.")
    BRAILLE_MARGIN_HEIGHT: float = Field(default=20.0, description="Top/bottom margin in mm.")
    BRAILLE_LETTER_WIDTH: float = Field(
        default=2.54, description="Distance between two dots of a cell in mm."
    )
    BRAILLE_LETTER_PADDING: float = Field(
        default=3.75, description="Extra space between two cells in mm."
    )
    BRAILLE_LINE_PADDING: float = Field(
        default=5.3, description="Extra space between two lines in mm."
    )
    BRAILLE_DOT_RADIUS: float = Field(default=1.25, description="Dot radius in mm.")
    BRAILLE_HEAD_UP_POSITION: float = Field(default=10.0, description="Raised head Z.")
    BRAILLE_HEAD_DOWN_POSITION: float = Field(default=-2.0, description="Embossing head Z.")
    BRAILLE_SPEED: float = Field(default=5000.0, description="Feed rate.")
    BRAILLE_CENTER_ORIGIN: bool = Field(
        default=False,
        description="Machine origin is the sheet center (delta printers).",
    )
    BRAILLE_RAPID_TRAVEL: bool = Field(
        default=True, description="Use G0 instead of G1 for travel moves."
    )
    BRAILLE_LANGUAGE: str = Field(default="6 dots", description="Built-in braille table.")
    BRAILLE_LANGUAGE_FILE: str | None = Field(
        default=None, description="Path to a JSON braille table overriding BRAILLE_LANGUAGE."
    )
    BRAILLE_DEBUG: bool = Field(default=False)

    @model_validator(mode="before")
    def _normalise_language(data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("BRAILLE_LANGUAGE"), str):
            data["BRAILLE_LANGUAGE"] = normalise_language(data["BRAILLE_LANGUAGE"])
        return data


def normalise_language(name: str) -> str:
    """Map a user-supplied table name to its built-in spelling."""

    stripped = name.strip()
    return LANGUAGE_ALIASES.get(stripped.lower(), stripped)


@lru_cache(maxsize=1)
def _load_settings(app_dir: Path) -> BraillegcodeConfig:
    provenance = ProvenanceRecorder()
    combined: dict[str, Any] = {}
    try:
        for path, label in discover_file_paths(
            APP_NAME, "yaml", app_dir=app_dir, extra_paths=None
        ):
            parsed = _parse_file(path, "yaml")
            if not isinstance(parsed, Mapping):
                raise IoError(f"{path}: expected a mapping at the root.")
            source = _path_to_source(label, "yaml", path)
            merge_layer(combined, parsed, provenance=provenance, source=source, layer="file")

        # .env first so that process variables win.
        dotenv_path = app_dir / ".env"
        layers = [(".env", dotenv_values(dotenv_path) if dotenv_path.exists() else {})]
        layers.append(("process", os.environ))
        allowed = BraillegcodeConfig.__field_infos__.keys()
        for prefix, values in layers:
            for key in sorted(allowed & values.keys()):
                if values[key] is not None:
                    merge_layer(
                        combined,
                        {key: values[key]},
                        provenance=provenance,
                        source=f"env:{prefix}:{key}",
                        layer="env",
                    )

        return BraillegcodeConfig.validate(combined, provenance=provenance)
    except IoError as exc:
        raise ConfigurationError(f"Configuration files could not be read: {exc}") from exc
    except SchemaError as exc:
        raise ConfigurationError(f"Configuration schema error: {exc}") from exc
    except ValidationError as exc:
        issues = "\n".join(
            f"- {'.'.join(map(str, entry.get('path') or []))}: {entry.get('message')}"
            for entry in exc.to_dict()
        )
        raise ConfigurationError(f"Invalid configuration:\n{issues}") from exc


def get_settings(app_dir: Path | None = None) -> BraillegcodeConfig:
    """Return the validated settings, loaded once per directory."""

    return _load_settings(app_dir or Path.cwd())


def geometry_from_settings(settings: BraillegcodeConfig) -> DeviceGeometry:
    """Build the device geometry described by the settings."""

    return DeviceGeometry(
        paper_width=float(settings.BRAILLE_PAPER_WIDTH),
        paper_height=float(settings.BRAILLE_PAPER_HEIGHT),
        margin_width=float(settings.BRAILLE_MARGIN_WIDTH),
        margin_height=float(settings.BRAILLE_MARGIN_HEIGHT),
        letter_width=float(settings.BRAILLE_LETTER_WIDTH),
        letter_padding=float(settings.BRAILLE_LETTER_PADDING),
        line_padding=float(settings.BRAILLE_LINE_PADDING),
        dot_radius=float(settings.BRAILLE_DOT_RADIUS),
        head_up_position=float(settings.BRAILLE_HEAD_UP_POSITION),
        head_down_position=float(settings.BRAILLE_HEAD_DOWN_POSITION),
        speed=float(settings.BRAILLE_SPEED),
        center_origin=bool(settings.BRAILLE_CENTER_ORIGIN),
        language=settings.BRAILLE_LANGUAGE,
        rapid_travel=bool(settings.BRAILLE_RAPID_TRAVEL),
    )
