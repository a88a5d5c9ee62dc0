"""
Pydantic models for shared stream API responses.

Field names are snake_case; the service's camelCase names are accepted as aliases and
unknown fields are ignored, so schema drift on the server side does not break decoding.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .decoding import UINT32_MAX, coerce_optional_str, coerce_uint

log = logging.getLogger(__name__)

_LENIENT = ConfigDict(populate_by_name=True, extra="ignore")


class Derivative(BaseModel):
    """One rendition of a photo. The URL starts unset and is filled by enrichment."""

    model_config = _LENIENT

    checksum: str = ""
    file_size: Optional[int] = Field(default=None, alias="fileSize")
    width: Optional[int] = None
    height: Optional[int] = None
    url: Optional[str] = None

    @field_validator("checksum", mode="before")
    @classmethod
    def _checksum_or_empty(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("file_size", mode="before")
    @classmethod
    def _lenient_size(cls, v: Any) -> Optional[int]:
        return coerce_uint(v)

    @field_validator("width", "height", mode="before")
    @classmethod
    def _lenient_dimension(cls, v: Any) -> Optional[int]:
        return coerce_uint(v, max_value=UINT32_MAX)

    @field_validator("url", mode="before")
    @classmethod
    def _lenient_url(cls, v: Any) -> Optional[str]:
        return coerce_optional_str(v)

    @property
    def pixel_area(self) -> Optional[int]:
        """width x height, or None unless both dimensions are known."""
        if self.width is None or self.height is None:
            return None
        return self.width * self.height


class Photo(BaseModel):
    """A photo (or video) in a shared stream with its derivatives keyed by name."""

    model_config = _LENIENT

    photo_guid: str = Field(default="", alias="photoGuid")
    derivatives: Dict[str, Derivative] = Field(default_factory=dict)
    caption: Optional[str] = None
    date_created: Optional[str] = Field(default=None, alias="dateCreated")
    batch_date_created: Optional[str] = Field(default=None, alias="batchDateCreated")
    width: Optional[int] = None
    height: Optional[int] = None

    @field_validator("derivatives", mode="before")
    @classmethod
    def _drop_malformed_derivatives(cls, v: Any) -> Dict[str, Any]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            log.warning(
                f"Ignoring derivatives of unexpected type {type(v).__name__}."
            )
            return {}
        kept = {}
        for key, value in v.items():
            if isinstance(value, (dict, Derivative)):
                kept[str(key)] = value
            else:
                log.warning(f"Dropping malformed derivative '{key}'.")
        return kept

    @field_validator("photo_guid", mode="before")
    @classmethod
    def _guid_or_empty(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("caption", "date_created", "batch_date_created", mode="before")
    @classmethod
    def _lenient_text(cls, v: Any) -> Optional[str]:
        return coerce_optional_str(v)

    @field_validator("width", "height", mode="before")
    @classmethod
    def _lenient_dimension(cls, v: Any) -> Optional[int]:
        return coerce_uint(v, max_value=UINT32_MAX)


class StreamMetadata(BaseModel):
    """Album-level metadata. `stream_name` is the one mandatory field."""

    model_config = _LENIENT

    stream_name: str = Field(alias="streamName", min_length=1)
    user_first_name: str = Field(default="", alias="userFirstName")
    user_last_name: str = Field(default="", alias="userLastName")
    stream_ctag: str = Field(default="", alias="streamCtag")
    items_returned: int = Field(default=0, alias="itemsReturned")
    locations: Any = None

    @field_validator("user_first_name", "user_last_name", "stream_ctag", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        return coerce_optional_str(v) or ""

    @field_validator("items_returned", mode="before")
    @classmethod
    def _lenient_count(cls, v: Any) -> int:
        return coerce_uint(v, default=0, max_value=UINT32_MAX)

    @property
    def owner_name(self) -> str:
        return f"{self.user_first_name} {self.user_last_name}".strip()


class AlbumResult(BaseModel):
    """
    The outcome of fetching one album: metadata, photos in server order, and any
    warnings about data that was tolerated rather than treated as an error.
    """

    metadata: StreamMetadata
    photos: List[Photo] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def photo_guids(self) -> List[str]:
        return [photo.photo_guid for photo in self.photos]
