from pydantic import BaseModel, Field


class LengthTarget(BaseModel, frozen=True):
    """How long a summary should be, in words and in seconds read aloud."""

    target_words: int = Field(..., gt=0)
    target_seconds: int = Field(..., gt=0)


class PreparedContent(BaseModel, frozen=True):
    """Article text after truncation, with the word count the prompt quotes."""

    prepared_text: str
    word_count: int = Field(..., ge=0)
