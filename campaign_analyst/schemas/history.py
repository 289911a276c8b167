"""
Pydantic models for persisted analysis history and its chat thread.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .analysis import AnalysisInputs


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    """One message in a history entry's follow-up conversation."""

    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "assistant"] = Field(
        ...,
        validation_alias=AliasChoices("role", "type"),
    )
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class HistoryResults(BaseModel):
    """Outputs of an analysis run plus the follow-up conversation."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    analysis_html: str = Field(..., alias="analysisHtml")
    analysis_raw_text: str = Field("", alias="analysisRawText")
    model_display_name: Optional[str] = Field(None, alias="modelDisplayName")
    prompt_text: Optional[str] = Field(None, alias="promptText")
    structured_analysis: Dict[str, str] = Field(
        default_factory=dict, alias="structuredAnalysis"
    )
    chat_messages: List[ChatMessage] = Field(
        default_factory=list, alias="chatMessages"
    )


class HistoryEntryCreate(BaseModel):
    """Payload for saving a new history entry."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: Optional[datetime] = None
    inputs: AnalysisInputs
    results: HistoryResults


class HistoryEntry(HistoryEntryCreate):
    """A persisted history entry owned by one user."""

    id: str
    user_id: str = Field(..., alias="userId")
    timestamp: datetime


class ChatReplaceRequest(BaseModel):
    """Full conversation to store for a history entry."""

    model_config = ConfigDict(populate_by_name=True)

    chat_messages: List[ChatMessage] = Field(..., alias="chatMessages")


def dump_document(model: BaseModel) -> Dict[str, Any]:
    """Serialize a model into the JSON-compatible camelCase document shape."""
    return model.model_dump(mode="json", by_alias=True)


__all__ = [
    "ChatMessage",
    "ChatReplaceRequest",
    "HistoryEntry",
    "HistoryEntryCreate",
    "HistoryResults",
    "dump_document",
]
