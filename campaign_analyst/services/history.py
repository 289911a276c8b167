"""Ownership-checked operations over the history document store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from campaign_analyst.clients.history_store import HistoryStore
from campaign_analyst.schemas import (
    ChatMessage,
    HistoryEntry,
    HistoryEntryCreate,
    dump_document,
)

logger = logging.getLogger(__name__)


class HistoryNotFoundError(LookupError):
    """Raised when a history entry does not exist."""


class HistoryAccessError(PermissionError):
    """Raised when a user touches a history entry owned by someone else."""


def _normalize_timestamp(value: Optional[datetime]) -> str:
    moment = value or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()


class HistoryService:
    """Create, read, replace-chat and delete history entries for their owner."""

    def __init__(self, store: HistoryStore) -> None:
        self._store = store

    def list_entries(self, user_id: str) -> List[HistoryEntry]:
        documents = self._store.list_for_owner(user_id)
        logger.info("Fetched %d history entries for user %s", len(documents), user_id)
        return [HistoryEntry.model_validate(document) for document in documents]

    def save_entry(self, user_id: str, entry: HistoryEntryCreate) -> str:
        document = dump_document(entry)
        document.pop("timestamp", None)
        entry_id = self._store.add(
            user_id=user_id,
            timestamp=_normalize_timestamp(entry.timestamp),
            document=document,
        )
        logger.info("Saved history entry %s for user %s", entry_id, user_id)
        return entry_id

    def get_entry(self, user_id: str, entry_id: str) -> HistoryEntry:
        return HistoryEntry.model_validate(self._owned_document(user_id, entry_id))

    def replace_chat(
        self, user_id: str, entry_id: str, messages: List[ChatMessage]
    ) -> List[Dict[str, Any]]:
        """Store ``messages`` as the entry's whole conversation.

        The stored list is overwritten, not merged: a caller that did not see
        another caller's message will drop it.
        """
        self._owned_document(user_id, entry_id)
        serialized = [dump_document(message) for message in messages]
        if not self._store.update_field(entry_id, "results.chatMessages", serialized):
            raise HistoryNotFoundError(entry_id)
        logger.info(
            "Replaced chat for history entry %s (%d messages)",
            entry_id,
            len(serialized),
        )
        return serialized

    def delete_entry(self, user_id: str, entry_id: str) -> None:
        self._owned_document(user_id, entry_id)
        self._store.delete(entry_id)
        logger.info("Deleted history entry %s for user %s", entry_id, user_id)

    def clear(self, user_id: str) -> int:
        deleted = self._store.delete_for_owner(user_id)
        logger.info("Deleted %d history entries for user %s", deleted, user_id)
        return deleted

    def _owned_document(self, user_id: str, entry_id: str) -> Dict[str, Any]:
        document = self._store.get(entry_id)
        if document is None:
            raise HistoryNotFoundError(entry_id)
        if document.get("userId") != user_id:
            logger.warning(
                "User %s attempted to access history entry %s", user_id, entry_id
            )
            raise HistoryAccessError(entry_id)
        return document


__all__ = ["HistoryAccessError", "HistoryNotFoundError", "HistoryService"]
