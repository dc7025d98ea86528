"""Shared data models for the docx-to-pdf converter."""

from enum import Enum
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RequestId = Union[int, str]


class PersistenceMode(str, Enum):
    """Where converted documents end up."""

    REMOTE = "remote"
    LOCAL = "local"


class FailurePolicy(str, Enum):
    """How a batch reacts to a failed pipeline."""

    FAIL_FAST = "fail_fast"
    COLLECT = "collect"


class ConversionRequest(BaseModel):
    """Identifies one source document to convert."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    bucket: Optional[str] = None
    source_prefix: str = Field(
        default="",
        validation_alias=AliasChoices("source_prefix", "sourcePrefix", "prefix"),
    )
    source_key: str = Field(
        validation_alias=AliasChoices("source_key", "sourceKey", "key"),
        min_length=1,
    )
    id: Optional[RequestId] = None

    @property
    def source_object_key(self) -> str:
        """Full object key of the source document inside its bucket."""
        if not self.source_prefix:
            return self.source_key
        return f"{self.source_prefix}/{self.source_key}"


class PersistedObject(BaseModel):
    """Where a converted payload was stored."""

    model_config = ConfigDict(frozen=True)

    destination_prefix: str
    destination_key: str
    local_path: Optional[str] = None


class ConversionResult(BaseModel):
    """Result of converting a single document."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: Optional[RequestId] = None
    destination_prefix: str
    destination_key: str
    byte_size: int
    local_path: Optional[str] = None

    def to_payload(self) -> dict:
        """Serialize with camelCase keys, dropping ``localPath`` when unset."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ItemOutcome(BaseModel):
    """Success or failure of one pipeline run inside a batch."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int
    request: ConversionRequest
    result: Optional[ConversionResult] = None
    error: Optional[BaseException] = Field(default=None, exclude=True)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_type(self) -> str:
        return type(self.error).__name__ if self.error is not None else ""

    def to_payload(self) -> dict:
        payload: dict = {"index": self.index, "ok": self.ok}
        if self.request.id is not None:
            payload["id"] = self.request.id
        if self.result is not None:
            payload["result"] = self.result.to_payload()
        else:
            payload["errorType"] = self.error_type
            payload["error"] = str(self.error)
        return payload
