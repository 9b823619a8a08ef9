from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SummarizeRequest(BaseModel):
    text: Optional[str] = None
    url: Optional[str] = None


class SummaryMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_word_count: int = Field(..., alias="originalWordCount")
    # seconds of reading time; the wire name predates the word target
    target_seconds: int = Field(..., alias="targetLength")
    target_words: int = Field(..., alias="targetWords")


class SummarizeResponse(BaseModel):
    summary: str
    metadata: SummaryMetadata


class SpeechRequest(BaseModel):
    text: Optional[str] = None


class SpeechResponse(BaseModel):
    audio: str


class ErrorResponse(BaseModel):
    error: str
