"""Backup payload: the same shape is produced by export and consumed by restore."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackupEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    content: dict[str, Any]  # plan document, kept verbatim

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        """Only plain plan file names; nothing that escapes the user directory."""
        v = v.strip()
        if not v.endswith(".json") or v.endswith(".cycle.json"):
            raise ValueError("fileName must be a plan .json file")
        if "/" in v or "\\" in v or v.startswith("."):
            raise ValueError("fileName must not contain path components")
        return v


class BackupPayload(BaseModel):
    plans: list[BackupEntry]

    def to_json_data(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
