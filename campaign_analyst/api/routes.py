"""
FastAPI routes for campaign analysis and follow-up help.
"""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from campaign_analyst.clients.gemini import GeminiModelError, UnknownModelError
from campaign_analyst.dependencies import (
    OptionalUser,
    get_analysis_service,
    get_help_chat_service,
)
from campaign_analyst.schemas import (
    AnalysisInputs,
    AnalysisResponse,
    HelpResponse,
    KpiRecommendations,
)
from campaign_analyst.services import (
    AnalysisService,
    FileUpload,
    HelpChatService,
    HelpRequest,
    InvalidConversationError,
)
from campaign_analyst.services.file_extraction import (
    FileExtractionError,
    FileTooLargeError,
    UnsupportedFileTypeError,
)
from campaign_analyst.services.help_chat import parse_conversation_history
from campaign_analyst.services.tactics import recommended_kpis
from campaign_analyst.utils.errors import describe_error
from campaign_analyst.utils.retry import RetryExhaustedError

router = APIRouter()
logger = logging.getLogger(__name__)


class RequestInputError(ValueError):
    """Raised when a required form field is missing or malformed."""


def error_response(status: HTTPStatus, exc: BaseException | str) -> JSONResponse:
    """Render a failure as ``{error, details}`` with a user-facing message."""
    details = str(exc)
    return JSONResponse(
        status_code=status,
        content={"error": describe_error(details), "details": details},
    )


def _status_for(exc: Exception) -> Optional[HTTPStatus]:
    if isinstance(exc, FileTooLargeError):
        return HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    if isinstance(
        exc,
        (
            RequestInputError,
            UnsupportedFileTypeError,
            FileExtractionError,
            UnknownModelError,
            InvalidConversationError,
        ),
    ):
        return HTTPStatus.BAD_REQUEST
    if isinstance(exc, RetryExhaustedError):
        return HTTPStatus.SERVICE_UNAVAILABLE
    if isinstance(exc, GeminiModelError):
        return HTTPStatus.BAD_GATEWAY
    return None


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


def _form_value(value: Optional[str]) -> Optional[str]:
    """Unwrap a field the browser sent through ``JSON.stringify``.

    Plain text that is not JSON is kept as sent. JSON ``null`` and empty
    strings count as missing.
    """
    text = _blank_to_none(value)
    if text is None:
        return None
    try:
        decoded = json.loads(text)
    except ValueError:
        return text
    if decoded is None:
        return None
    if isinstance(decoded, str):
        return _blank_to_none(decoded)
    return text


async def _read_upload(upload: UploadFile) -> FileUpload:
    return FileUpload(
        file_name=upload.filename or "upload",
        data=await upload.read(),
        content_type=upload.content_type,
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get(
    "/kpi-recommendations",
    response_model=KpiRecommendations,
    status_code=HTTPStatus.OK,
)
async def kpi_recommendations(
    tactic: Optional[str] = Query(
        default=None, description="Tactic to look up; all tactics when omitted."
    ),
) -> KpiRecommendations:
    return KpiRecommendations(recommendations=recommended_kpis(tactic))


@router.post("/analyze", status_code=HTTPStatus.OK, response_model=None)
async def analyze_campaign(
    service: Annotated[AnalysisService, Depends(get_analysis_service)],
    user: OptionalUser,
    file: Optional[UploadFile] = File(default=None),
    tactics: Optional[str] = Form(default=None),
    tactic_name: Optional[str] = Form(default=None, alias="tacticName"),
    kpis: Optional[str] = Form(default=None),
    kpi_name: Optional[str] = Form(default=None, alias="kpiName"),
    current_situation: Optional[str] = Form(default=None, alias="currentSituation"),
    client_name: Optional[str] = Form(default=None, alias="clientName"),
    desired_outcome: Optional[str] = Form(default=None, alias="desiredOutcome"),
    target_cpa: Optional[str] = Form(default=None, alias="targetCPA"),
    target_roas: Optional[str] = Form(default=None, alias="targetROAS"),
    model_id: Optional[str] = Form(default=None, alias="modelId"),
    output_detail: Optional[str] = Form(default=None, alias="outputDetail"),
    save_to_history: bool = Form(default=True, alias="saveToHistory"),
) -> AnalysisResponse | JSONResponse:
    """Analyze an uploaded CSV, XLSX or PDF report for one tactic."""
    try:
        if file is None:
            raise RequestInputError("No file uploaded.")
        tactic = _blank_to_none(tactic_name) or _form_value(tactics)
        if tactic is None:
            raise RequestInputError("Missing required field: tactics.")
        try:
            inputs = AnalysisInputs(
                tactic_name=tactic,
                kpi_name=_blank_to_none(kpi_name) or _form_value(kpis),
                situation_text=_blank_to_none(current_situation),
                client_name=_blank_to_none(client_name),
                desired_outcome=_blank_to_none(desired_outcome),
                target_cpa=_form_value(target_cpa),
                target_roas=_form_value(target_roas),
                model_id=_blank_to_none(model_id),
                output_detail=_blank_to_none(output_detail) or "detailed",
            )
        except ValidationError as exc:
            raise RequestInputError(f"Invalid analysis inputs: {exc}") from exc

        upload = await _read_upload(file)
        return await service.analyze(
            inputs, upload, user=user, save_to_history=save_to_history
        )
    except Exception as exc:
        status = _status_for(exc)
        if status is None:
            logger.exception("Unexpected failure while analyzing upload")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, exc)
        logger.warning("Analysis request failed with %s: %s", int(status), exc)
        return error_response(status, exc)


@router.post("/get-help", status_code=HTTPStatus.OK, response_model=None)
async def get_help(
    service: Annotated[HelpChatService, Depends(get_help_chat_service)],
    question: Optional[str] = Form(default=None),
    original_prompt: Optional[str] = Form(default=None, alias="originalPrompt"),
    original_analysis: Optional[str] = Form(default=None, alias="originalAnalysis"),
    tactic: Optional[str] = Form(default=None),
    kpi: Optional[str] = Form(default=None),
    file_name: Optional[str] = Form(default=None, alias="fileName"),
    current_situation: Optional[str] = Form(default=None, alias="currentSituation"),
    desired_outcome: Optional[str] = Form(default=None, alias="desiredOutcome"),
    conversation_history: Optional[str] = Form(
        default=None, alias="conversationHistory"
    ),
    model_id: Optional[str] = Form(default=None, alias="modelId"),
    context_file: Optional[UploadFile] = File(default=None, alias="contextFile"),
) -> HelpResponse | JSONResponse:
    """Answer a follow-up question about an earlier analysis."""
    try:
        text = _blank_to_none(question)
        if text is None:
            raise RequestInputError("Missing required field: question.")
        request = HelpRequest(
            question=text,
            conversation=parse_conversation_history(conversation_history),
            original_prompt=original_prompt,
            original_analysis=original_analysis,
            tactic=_blank_to_none(tactic),
            kpi=_blank_to_none(kpi),
            file_name=_blank_to_none(file_name),
            current_situation=_blank_to_none(current_situation),
            desired_outcome=_blank_to_none(desired_outcome),
            model_id=_blank_to_none(model_id),
            context_file=(
                await _read_upload(context_file) if context_file is not None else None
            ),
        )
        answer = await service.answer(request)
    except Exception as exc:
        status = _status_for(exc)
        if status is None:
            logger.exception("Unexpected failure while answering help question")
            return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, exc)
        logger.warning("Help request failed with %s: %s", int(status), exc)
        return error_response(status, exc)
    return HelpResponse(response=answer)


__all__ = ["error_response", "router"]
