from typing import List, Tuple

from .schemas import LengthTarget, PreparedContent


MAX_CONTENT_CHARS = 12000
TRUNCATION_MARKER = "..."

# (exclusive upper bound on word count, target words, target seconds)
LENGTH_TIERS: List[Tuple[float, int, int]] = [
    (1000, 50, 30),
    (3000, 75, 45),
    (float("inf"), 100, 60),
]


def count_words(text: str) -> int:
    return len((text or "").split())


def target_length(word_count: int) -> LengthTarget:
    """Reading-time heuristic: longer articles earn longer summaries."""
    for upper, words, seconds in LENGTH_TIERS:
        if word_count < upper:
            return LengthTarget(target_words=words, target_seconds=seconds)
    # unreachable: the last tier is unbounded
    raise AssertionError(word_count)


def truncate_content(content: str, max_chars: int = MAX_CONTENT_CHARS) -> str:
    content = content or ""
    if len(content) > max_chars:
        return content[:max_chars] + TRUNCATION_MARKER
    return content


def prepare_content(content: str) -> PreparedContent:
    """Truncate to the upstream budget, then count words on what is left.

    The count is taken after truncation so it matches the text the model
    actually sees; long articles therefore report at most ~12k chars of words.
    """
    text = truncate_content(content)
    return PreparedContent(prepared_text=text, word_count=count_words(text))
