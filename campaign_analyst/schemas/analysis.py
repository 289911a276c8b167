"""
Pydantic models for analysis and follow-up help requests.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalysisInputs(BaseModel):
    """Form inputs describing one analysis run, without the file bytes."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    tactic_name: str = Field(..., alias="tacticName", min_length=1)
    kpi_name: Optional[str] = Field(None, alias="kpiName")
    situation_text: Optional[str] = Field(None, alias="situationText")
    client_name: Optional[str] = Field(None, alias="clientName")
    desired_outcome: Optional[str] = Field(None, alias="desiredOutcome")
    target_cpa: Optional[float] = Field(None, alias="targetCpa")
    target_roas: Optional[float] = Field(None, alias="targetRoas")
    model_id: Optional[str] = Field(
        None,
        alias="modelId",
        description="Model tier ('fast' or 'quality') or an allowed model name.",
    )
    output_detail: Literal["brief", "detailed"] = Field(
        "detailed", alias="outputDetail"
    )
    file_name: Optional[str] = Field(None, alias="fileName")
    file_kind: Optional[Literal["csv", "xlsx", "pdf"]] = Field(
        None, alias="fileKind"
    )


class AnalysisResponse(BaseModel):
    """Response payload returned by ``POST /analyze``."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    html: str = Field(..., description="Extracted HTML fragment of the analysis.")
    raw: str = Field(..., description="Plain-text rendition of the analysis.")
    prompt: str = Field(..., description="Prompt submitted to the model.")
    model_name: str = Field(..., alias="modelName")
    raw_file_content: str = Field(..., alias="rawFileContent")
    structured_analysis: Dict[str, str] = Field(
        default_factory=dict,
        alias="structuredAnalysis",
        description="HTML per report section, keyed by section name.",
    )
    industry: Optional[str] = Field(
        None, description="Industry context detected from the inputs."
    )
    history_saved: bool = Field(False, alias="historySaved")
    entry_id: Optional[str] = Field(None, alias="entryId")
    warning: Optional[str] = Field(
        None, description="Non-blocking problem encountered after the analysis."
    )


class HelpResponse(BaseModel):
    """Response payload returned by ``POST /get-help``."""

    response: str


class KpiRecommendations(BaseModel):
    """Recommended KPIs per tactic."""

    recommendations: Dict[str, List[str]]


__all__ = [
    "AnalysisInputs",
    "AnalysisResponse",
    "HelpResponse",
    "KpiRecommendations",
]
