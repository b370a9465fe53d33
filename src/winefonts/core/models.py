"""Pydantic models for source catalogs and compiled manifests."""

import uuid
from enum import Enum
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    field_validator,
    model_validator,
)

from .exceptions import (
    ConflictingDependencyError,
    InvalidIdentifierError,
    UnknownInstallationTypeError,
)

PLACEHOLDER_ID = "<UUID>"


def generate_uuid() -> str:
    """Generate a fresh random (version 4) UUID string."""
    return str(uuid.uuid4())


def validate_identifier(value: str) -> str:
    """Accept a UUID or the placeholder, returning it exactly as written."""
    if value == PLACEHOLDER_ID:
        return value
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        raise InvalidIdentifierError(str(value)) from None
    return value


class FontCategory(str, Enum):
    """Font categories."""

    CURSIVE = "cursive"
    DISPLAY = "display"
    MONOSPACE = "monospace"
    SANS_SERIF = "sans-serif"
    SERIF = "serif"
    SYMBOL = "symbol"


class Installation(BaseModel):
    """One complete, required method of installing a font.

    Before compilation exactly one of ``local_path`` (``_localPath``) or
    ``url`` (``_url``) names the binary dependency. After compilation both are
    cleared and ``download`` holds the id of the matching download record.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str
    local_path: str | None = Field(
        None, alias="_localPath", description="Path relative to the catalog"
    )
    url: str | None = Field(None, alias="_url", description="Absolute URL")
    download: str | None = Field(None, description="Download record id")

    @model_validator(mode="after")
    def check_single_dependency(self) -> "Installation":
        if self.local_path is not None and self.url is not None:
            raise ConflictingDependencyError()
        return self

    @property
    def has_dependency(self) -> bool:
        return self.local_path is not None or self.url is not None

    def sort_payload(self) -> None:
        """Put order-insensitive payload fields into canonical order."""

    def bind_download(self, download_id: str) -> None:
        """Replace the raw dependency reference with a download id."""
        self.download = download_id
        self.local_path = None
        self.url = None


class CabextractInstallation(Installation):
    """Install by extracting ``files`` from a cabinet archive."""

    type: Literal["cabextract"] = "cabextract"
    files: list[str] = Field(..., min_length=1, description="Files to extract")

    def sort_payload(self) -> None:
        self.files.sort()


INSTALLATION_TYPES: dict[str, type[Installation]] = {
    "cabextract": CabextractInstallation,
}


def parse_installation(data: Any) -> Installation:
    """Build the installation variant selected by ``data["type"]``."""
    if isinstance(data, Installation):
        return data
    if not isinstance(data, dict):
        raise ValueError(f"installation must be an object, got {type(data).__name__}")

    installation_type = data.get("type")
    variant = INSTALLATION_TYPES.get(installation_type)
    if variant is None:
        raise UnknownInstallationTypeError(str(installation_type))
    return variant.model_validate(data)


class Font(BaseModel):
    """A named typeface entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    short_name: str = Field(..., alias="shortName")
    publisher: str
    categories: list[FontCategory] = Field(default_factory=list)
    installations: list[SerializeAsAny[Installation]] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def check_id(cls, v):
        return validate_identifier(v)

    @field_validator("installations", mode="before")
    @classmethod
    def parse_installations(cls, v):
        if not isinstance(v, list):
            return v
        return [parse_installation(item) for item in v]

    @property
    def has_placeholder_id(self) -> bool:
        return self.id == PLACEHOLDER_ID


class Group(BaseModel):
    """A named collection of fonts, referenced by font name."""

    id: str
    name: str
    fonts: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def check_id(cls, v):
        return validate_identifier(v)

    @property
    def has_placeholder_id(self) -> bool:
        return self.id == PLACEHOLDER_ID


class SourceCatalog(BaseModel):
    """The human-maintained catalog (``fonts.json``)."""

    groups: list[Group] = Field(default_factory=list)
    fonts: list[Font] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Download(BaseModel):
    """A content-addressed binary dependency."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    download_url: str = Field(..., alias="downloadURL")
    file_size: int = Field(..., ge=0, alias="fileSize")
    hash: str = Field(..., min_length=64, max_length=64)


class CompiledManifest(BaseModel):
    """The versioned distribution manifest."""

    version: str
    downloads: list[Download] = Field(default_factory=list)
    fonts: list[Font] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def download_ids(self) -> set[str]:
        return {download.id for download in self.downloads}
