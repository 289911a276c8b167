"""Service layer exports."""

from .analysis import AnalysisService, FileUpload
from .help_chat import HelpChatService, HelpRequest, InvalidConversationError
from .history import HistoryAccessError, HistoryNotFoundError, HistoryService
from .prompt_builder import PromptTemplates

__all__ = [
    "AnalysisService",
    "FileUpload",
    "HelpChatService",
    "HelpRequest",
    "HistoryAccessError",
    "HistoryNotFoundError",
    "HistoryService",
    "InvalidConversationError",
    "PromptTemplates",
]
