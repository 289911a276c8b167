"""Service that turns an uploaded campaign file into a Gemini-written analysis."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from campaign_analyst.clients.gemini import GeminiClient
from campaign_analyst.clients.google_auth import AuthenticatedUser
from campaign_analyst.schemas import (
    AnalysisInputs,
    AnalysisResponse,
    HistoryEntryCreate,
    HistoryResults,
)
from campaign_analyst.services.file_extraction import extract_content
from campaign_analyst.services.history import HistoryService
from campaign_analyst.services.industry import classify_industry
from campaign_analyst.services.prompt_builder import (
    PromptTemplates,
    build_analysis_prompt,
    select_template,
)
from campaign_analyst.services.response_parser import (
    extract_sections,
    parse_analysis_response,
)

logger = logging.getLogger(__name__)

HISTORY_SAVE_WARNING = (
    "Your analysis is ready, but it could not be saved to your history."
)


@dataclass(slots=True)
class FileUpload:
    """Raw bytes of an uploaded file plus the metadata the client sent."""

    file_name: str
    data: bytes
    content_type: Optional[str] = None


class AnalysisService:
    """Run the extract, classify, prompt, invoke and parse pipeline."""

    def __init__(
        self,
        gemini_client: GeminiClient,
        templates: PromptTemplates,
        history_service: HistoryService | None = None,
        *,
        max_upload_bytes: int | None = None,
    ) -> None:
        self._gemini = gemini_client
        self._templates = templates
        self._history = history_service
        self._max_upload_bytes = max_upload_bytes

    async def analyze(
        self,
        inputs: AnalysisInputs,
        upload: FileUpload,
        *,
        user: AuthenticatedUser | None = None,
        save_to_history: bool = True,
    ) -> AnalysisResponse:
        model = self._gemini.resolve_model(inputs.model_id)
        extracted = await asyncio.to_thread(
            extract_content,
            upload.data,
            upload.file_name,
            upload.content_type,
            max_bytes=self._max_upload_bytes,
        )
        inputs = inputs.model_copy(
            update={"file_name": upload.file_name, "file_kind": extracted.kind}
        )

        industry = classify_industry(extracted.text, inputs.situation_text or "")
        prompt = build_analysis_prompt(
            template=select_template(self._templates, inputs.output_detail),
            file_name=upload.file_name,
            tactic=inputs.tactic_name,
            kpi=inputs.kpi_name,
            current_situation=inputs.situation_text,
            data_string=extracted.text,
            industry=industry,
            desired_outcome=inputs.desired_outcome,
            client_name=inputs.client_name,
            target_cpa=inputs.target_cpa,
            target_roas=inputs.target_roas,
        )

        result = await self._gemini.generate_text(prompt, model=model)
        parsed = parse_analysis_response(result.raw_text)
        response = AnalysisResponse(
            html=parsed.html,
            raw=parsed.plain_text,
            prompt=prompt,
            model_name=model.display_name,
            raw_file_content=extracted.text,
            structured_analysis=extract_sections(parsed.html),
            industry=industry.name if industry else None,
        )

        if user is not None and save_to_history:
            self._save_history(user, inputs, response)
        return response

    def _save_history(
        self,
        user: AuthenticatedUser,
        inputs: AnalysisInputs,
        response: AnalysisResponse,
    ) -> None:
        if self._history is None:
            return
        entry = HistoryEntryCreate(
            inputs=inputs,
            results=HistoryResults(
                analysis_html=response.html,
                analysis_raw_text=response.raw,
                model_display_name=response.model_name,
                prompt_text=response.prompt,
                structured_analysis=response.structured_analysis,
            ),
        )
        try:
            response.entry_id = self._history.save_entry(user.sub, entry)
        except Exception:
            # The analysis itself succeeded; only the history side effect failed.
            logger.exception("Failed to save history entry for user %s", user.sub)
            response.warning = HISTORY_SAVE_WARNING
            return
        response.history_saved = True


__all__ = ["AnalysisService", "FileUpload", "HISTORY_SAVE_WARNING"]
