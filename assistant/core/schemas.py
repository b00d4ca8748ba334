from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


PhraseMap = Dict[str, str]
Glossary = Dict[str, PhraseMap]

DEFAULT_PHASE = "Phase 3 – Solid Foods"
DEFAULT_WEIGHT_LOSS = "25 kg"
DEFAULT_ALERT_LEVEL = "Stable"


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = Field(..., description="'user' or 'assistant'")
    text: str


class PatientContext(BaseModel):
    """Per-request recovery details supplied by the UI.

    Missing or blank fields fall back to the defaults above.
    """

    model_config = ConfigDict(populate_by_name=True)

    phase: str = DEFAULT_PHASE
    weight_loss: str = Field(DEFAULT_WEIGHT_LOSS, alias="weightLoss")
    alert_level: str = Field(DEFAULT_ALERT_LEVEL, alias="alertLevel")

    @field_validator("phase", "weight_loss", "alert_level", mode="before")
    @classmethod
    def _blank_to_default(cls, value, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value


class DialectMatch(BaseModel):
    dialect: str
    canonical_phrase: str


class LearningRecord(BaseModel):
    text: str
    detected_lang: str
    reply: str
    # None lets the store stamp the write time server-side.
    created_at: Optional[datetime] = None

    def to_document(self) -> Dict[str, object]:
        return {
            "text": self.text,
            "detectedLang": self.detected_lang,
            "reply": self.reply,
            "createdAt": self.created_at,
        }


class AssistantReply(BaseModel):
    reply_text: str
    detected_dialect: Optional[str] = None


Conversation = List[ChatMessage]
