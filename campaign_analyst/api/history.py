"""
Authenticated CRUD routes over a user's analysis history.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from campaign_analyst.dependencies import CurrentUser, get_history_service
from campaign_analyst.schemas import (
    ChatReplaceRequest,
    HistoryEntryCreate,
    dump_document,
)
from campaign_analyst.services import (
    HistoryAccessError,
    HistoryNotFoundError,
    HistoryService,
)

router = APIRouter(prefix="/history", tags=["history"])
logger = logging.getLogger(__name__)

HistoryServiceDependency = Annotated[HistoryService, Depends(get_history_service)]


class HistoryRequestError(Exception):
    """A history route failure, rendered as ``{message}``."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)


async def history_error_handler(
    request: Request, exc: HistoryRequestError
) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def _not_found(entry_id: str) -> HistoryRequestError:
    return HistoryRequestError(
        f"History entry {entry_id} not found.", HTTPStatus.NOT_FOUND
    )


def _forbidden() -> HistoryRequestError:
    return HistoryRequestError(
        "You do not have access to this history entry.", HTTPStatus.FORBIDDEN
    )


@router.get("", status_code=HTTPStatus.OK)
async def list_history(user: CurrentUser, service: HistoryServiceDependency) -> dict:
    entries = service.list_entries(user.sub)
    return {
        "message": f"Found {len(entries)} history entries.",
        "data": [dump_document(entry) for entry in entries],
    }


@router.post("", status_code=HTTPStatus.CREATED)
async def create_history_entry(
    user: CurrentUser,
    service: HistoryServiceDependency,
    payload: Optional[Dict[str, Any]] = Body(default=None),
) -> dict:
    if not payload:
        raise HistoryRequestError(
            "Request body must contain a history entry.", HTTPStatus.BAD_REQUEST
        )
    try:
        entry = HistoryEntryCreate.model_validate(payload)
    except ValidationError as exc:
        raise HistoryRequestError(
            f"Invalid history entry: {exc.errors()[0]['msg']}",
            HTTPStatus.BAD_REQUEST,
        ) from exc

    entry_id = service.save_entry(user.sub, entry)
    return {"message": "History entry saved.", "entryId": entry_id}


@router.delete("", status_code=HTTPStatus.OK)
async def clear_history(user: CurrentUser, service: HistoryServiceDependency) -> dict:
    deleted = service.clear(user.sub)
    return {"message": f"Deleted {deleted} history entries.", "deleted": deleted}


@router.get("/{entry_id}", status_code=HTTPStatus.OK)
async def get_history_entry(
    entry_id: str, user: CurrentUser, service: HistoryServiceDependency
) -> dict:
    try:
        entry = service.get_entry(user.sub, entry_id)
    except HistoryNotFoundError as exc:
        raise _not_found(entry_id) from exc
    except HistoryAccessError as exc:
        raise _forbidden() from exc
    return {"message": "History entry found.", "data": dump_document(entry)}


@router.delete("/{entry_id}", status_code=HTTPStatus.OK)
async def delete_history_entry(
    entry_id: str, user: CurrentUser, service: HistoryServiceDependency
) -> dict:
    try:
        service.delete_entry(user.sub, entry_id)
    except HistoryNotFoundError as exc:
        raise _not_found(entry_id) from exc
    except HistoryAccessError as exc:
        raise _forbidden() from exc
    return {"message": "History entry deleted."}


@router.put("/{entry_id}/chat", status_code=HTTPStatus.OK)
async def replace_history_chat(
    entry_id: str,
    payload: ChatReplaceRequest,
    user: CurrentUser,
    service: HistoryServiceDependency,
) -> dict:
    """Overwrite the entry's conversation with ``chatMessages``."""
    try:
        messages = service.replace_chat(user.sub, entry_id, payload.chat_messages)
    except HistoryNotFoundError as exc:
        raise _not_found(entry_id) from exc
    except HistoryAccessError as exc:
        raise _forbidden() from exc
    return {"message": "Chat history updated.", "chatMessages": messages}


__all__ = ["HistoryRequestError", "history_error_handler", "router"]
