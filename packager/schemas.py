"""Pydantic schema for the metadata sidecar carried inside every archive."""

from pydantic import BaseModel, ConfigDict, Field


class DataFileMetadata(BaseModel):
    """
    Provenance record of a packaged payload.

    Serialized with the wire names FileName, CreationTimestamp and OriginUID.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(alias="FileName")
    creation_timestamp: int = Field(alias="CreationTimestamp")
    origin_uid: str = Field(alias="OriginUID")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, text: str) -> "DataFileMetadata":
        return cls.model_validate_json(text)
