"""Request and response models for the summarize API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SummarizeRequest(BaseModel):
    """Payload accepted by ``POST /api/summarize``."""

    url: Optional[str] = Field(None, description="Absolute http(s) URL of a blog post.")


class SummarizeResponse(BaseModel):
    """Successful pipeline output, serialized with the camelCase keys the web form reads."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    summary: str
    summary_translated: str = Field(..., alias="summaryTranslated")
    full_text: str = Field(..., alias="fullText")
    url: str


class ErrorResponse(BaseModel):
    """Failure body; never includes partial results."""

    error: str
    kind: Optional[str] = None
