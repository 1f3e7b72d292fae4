from datetime import datetime

from pydantic import BaseModel, field_validator


class PromptRuleValidationError(ValueError):
    """Rule text was rejected before reaching the store."""


def normalize_prompt_text(text: str) -> str:
    """Trim rule text, rejecting blank or whitespace-only input."""
    trimmed = (text or "").strip()
    if not trimmed:
        raise PromptRuleValidationError("Prompt rule text must not be empty")
    return trimmed


class PromptRule(BaseModel):
    """A stored instruction consumed by the external extraction process."""
    id: int
    prompt: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PromptRuleText(BaseModel):
    """Request body for creating or updating a rule."""
    prompt: str

    @field_validator("prompt")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_prompt_text(value)
