"""Configuration models for the renderer commands."""

from __future__ import annotations

import math
import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from usdjs_renderer.errors import InvalidArgumentError

USDJS_ROOT_ENV = "USDJS_ROOT"
VIEWER_DIST_ENV = "USDJS_VIEWER_DIST"

# Relative to the usdjs repo root
FTLAB_SAMPLE_ROOT = "test/corpus/external/ft-lab-sample-usd/sample_usd-main"
FTLAB_README = "readme.md"

CAPTURE_SUFFIX = "__cinevva.png"


def parse_dimension(flag: str, raw) -> int:
    """Parse a --width/--height value into a positive integer."""
    if isinstance(raw, bool):
        raise InvalidArgumentError(f"Invalid {flag} {raw}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid {flag} {raw}") from None
    if not math.isfinite(value) or value <= 0 or value != int(value):
        raise InvalidArgumentError(f"Invalid {flag} {raw}")
    return int(value)


class CaptureSettings(BaseModel):
    origin: str = "http://usdjs.local"
    canvas_selector: str = '[data-testid="usdjs-canvas"]'
    canvas_timeout_ms: int = 10_000
    settle_ms: int = 100
    headless: bool = True

    @property
    def index_url(self) -> str:
        return f"{self.origin}/index.html?headless=1"


class _SizedArgs(BaseModel):
    width: int = 1024
    height: int = 1024
    compose: bool = True
    viewer_dist: Optional[str] = None

    @field_validator("width", "height", mode="before")
    @classmethod
    def check_dimension(cls, v, info: ValidationInfo) -> int:
        return parse_dimension(f"--{info.field_name}", v)

    @property
    def viewport(self) -> dict:
        return {"width": self.width, "height": self.height}


class RenderArgs(_SizedArgs):
    root: str = Field(default_factory=os.getcwd)
    entry: str = "scene.usda"
    out: str = "out.png"


class CompareArgs(_SizedArgs):
    usdjs_root: Optional[str] = None
    # Exact relative path of one README sample, e.g. samples/light/spot_light.usda
    sample: Optional[str] = None


class GalleryArgs(BaseModel):
    usdjs_root: Optional[str] = None
    out: Optional[str] = None
    # Accepted for compatibility; every discovered entry is always included.
    include_missing: bool = False
