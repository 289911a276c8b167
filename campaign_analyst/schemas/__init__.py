"""Public schema exports."""

from .analysis import (
    AnalysisInputs,
    AnalysisResponse,
    HelpResponse,
    KpiRecommendations,
)
from .history import (
    ChatMessage,
    ChatReplaceRequest,
    HistoryEntry,
    HistoryEntryCreate,
    HistoryResults,
    dump_document,
)

__all__ = [
    "AnalysisInputs",
    "AnalysisResponse",
    "ChatMessage",
    "ChatReplaceRequest",
    "HelpResponse",
    "HistoryEntry",
    "HistoryEntryCreate",
    "HistoryResults",
    "KpiRecommendations",
    "dump_document",
]
