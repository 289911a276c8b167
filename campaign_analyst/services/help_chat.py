"""Follow-up question answering about a previously generated analysis."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import ValidationError

from campaign_analyst.clients.gemini import GeminiClient
from campaign_analyst.schemas import ChatMessage
from campaign_analyst.services.analysis import FileUpload
from campaign_analyst.services.file_extraction import extract_content
from campaign_analyst.services.prompt_builder import PromptTemplates, build_help_prompt
from campaign_analyst.services.response_parser import strip_code_fences, strip_tags

logger = logging.getLogger(__name__)

NO_HISTORY = "No previous conversation."


class InvalidConversationError(ValueError):
    """Raised when the submitted conversation history is not valid JSON."""


@dataclass(slots=True)
class HelpRequest:
    """Everything the client sends with a follow-up question."""

    question: str
    conversation: List[ChatMessage] = field(default_factory=list)
    original_prompt: Optional[str] = None
    original_analysis: Optional[str] = None
    tactic: Optional[str] = None
    kpi: Optional[str] = None
    file_name: Optional[str] = None
    current_situation: Optional[str] = None
    desired_outcome: Optional[str] = None
    model_id: Optional[str] = None
    context_file: Optional[FileUpload] = None


def parse_conversation_history(raw: Optional[str]) -> List[ChatMessage]:
    """Decode the JSON conversation array posted by the client."""
    if raw is None or not raw.strip():
        return []
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidConversationError(
            f"conversationHistory is not valid JSON: {exc.msg}"
        ) from exc
    if not isinstance(payload, list):
        raise InvalidConversationError("conversationHistory must be a JSON array.")
    try:
        return [ChatMessage.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise InvalidConversationError(
            f"conversationHistory contains an invalid message: {exc.errors()[0]['msg']}"
        ) from exc


def render_conversation(messages: List[ChatMessage], limit: int) -> str:
    """Render the most recent ``limit`` messages as ``Role: text`` lines."""
    recent = messages[-limit:] if limit > 0 else []
    lines = [
        f"{message.role.capitalize()}: {strip_tags(message.content)}"
        for message in recent
    ]
    return "\n".join(lines) if lines else NO_HISTORY


class HelpChatService:
    """Answer follow-up questions with the original analysis as context."""

    def __init__(
        self,
        gemini_client: GeminiClient,
        templates: PromptTemplates,
        *,
        history_limit: int = 20,
        max_upload_bytes: int | None = None,
    ) -> None:
        self._gemini = gemini_client
        self._templates = templates
        self._history_limit = history_limit
        self._max_upload_bytes = max_upload_bytes

    async def answer(self, request: HelpRequest) -> str:
        model = self._gemini.resolve_model(request.model_id)

        context_name: Optional[str] = None
        context_content: Optional[str] = None
        if request.context_file is not None:
            upload = request.context_file
            extracted = await asyncio.to_thread(
                extract_content,
                upload.data,
                upload.file_name,
                upload.content_type,
                max_bytes=self._max_upload_bytes,
            )
            context_name = upload.file_name
            context_content = extracted.text

        prompt = build_help_prompt(
            template=self._templates.help_chat,
            question=request.question,
            conversation_history=render_conversation(
                request.conversation, self._history_limit
            ),
            tactic=request.tactic,
            kpi=request.kpi,
            file_name=request.file_name,
            current_situation=request.current_situation,
            desired_outcome=request.desired_outcome,
            original_prompt=request.original_prompt,
            original_analysis=request.original_analysis,
            context_file_name=context_name,
            context_file_content=context_content,
        )
        result = await self._gemini.generate_text(prompt, model=model)
        answer = strip_code_fences(result.raw_text)
        logger.info("Answered help question with %d characters", len(answer))
        return answer


__all__ = [
    "HelpChatService",
    "HelpRequest",
    "InvalidConversationError",
    "parse_conversation_history",
    "render_conversation",
]
