"""Corpus records shared by the indexer, the runner and the gallery."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SampleMapping(BaseModel):
    """One README row: a sample scene and its reference image."""
    model_config = ConfigDict(frozen=True)

    sample_rel: str  # samples/light/spot_light.usda
    ref_image_rel: str  # samples/light/images/spot_light.jpg


class GalleryEntry(BaseModel):
    sample_rel: str
    images_dir_rel: str
    ref_rel: str
    cinevva_rel: str


class TextFileRecord(BaseModel):
    path: str  # posix, relative to the walked root
    text: str
