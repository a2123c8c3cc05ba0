"""
Media library record as returned for `media.single` fields.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .types import IsoDateTime, Number


class MediaFormat(BaseModel):
    """One generated variant (thumbnail, small, medium, large)."""

    model_config = ConfigDict(extra="ignore")

    name: str
    hash: Optional[str] = None
    ext: Optional[str] = None
    mime: str
    path: Optional[str] = None
    size: Number
    url: str
    width: Number
    height: Number


class MediaFile(BaseModel):
    """
    Uploaded file record.

    Unknown keys are dropped, matching the other nested validators.
    """

    model_config = ConfigDict(extra="ignore")

    id: Number
    name: str
    alternativeText: Optional[str]
    caption: Optional[str]
    width: Optional[Number]
    height: Optional[Number]
    formats: dict[str, MediaFormat] = None
    hash: str
    ext: str
    mime: str
    size: Number
    url: str
    previewUrl: Optional[str]
    provider: str
    provider_metadata: Optional[Any] = None
    createdAt: IsoDateTime
    updatedAt: IsoDateTime
