from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from assistant.core.schemas import ChatMessage, PatientContext


SUPPORTED_LANGUAGES: Dict[str, str] = {
    "auto": "Auto",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "gl": "Galician",
    "pcm": "Nigerian Pidgin",
    "ig": "Igbo",
    "ha": "Hausa",
    "yo": "Yoruba",
    "zh": "Chinese (Simplified)",
}

SYSTEM_PROMPT = (
    "You are AI PostCare, an empathetic, multilingual virtual assistant "
    "specialized in post-bariatric care."
)

LANGUAGE_POLICY = (
    "LANGUAGE POLICY:\n"
    "• Requested language: {language}.\n"
    '• If the requested language is "Auto", detect it from the conversation '
    "and respond naturally in that language.\n"
    "• Support dialects (Pidgin, Yoruba, Igbo, Hausa, Galician). If the dialect "
    'is unknown, reply in English and add: "(Learning your dialect)".\n'
    "• Use a warm, reassuring, professional tone, like a caring nurse or "
    "doctor, never robotic."
)

MEDICAL_SAFETY = (
    "MEDICAL SAFETY:\n"
    "• If symptoms like fever, vomiting, bleeding, dehydration, or severe pain "
    "appear, advise the patient to contact a doctor immediately.\n"
    "• Keep messages short, empathetic, and practical."
)


def resolve_language(code: Optional[str]) -> Tuple[str, str]:
    """Map a language code to ``(code, label)``; unknown codes become ``auto``."""
    if code and code in SUPPORTED_LANGUAGES:
        return code, SUPPORTED_LANGUAGES[code]
    return "auto", SUPPORTED_LANGUAGES["auto"]


def render_transcript(conversation: Sequence[ChatMessage]) -> str:
    return "\n".join(f"{m.role.upper()}: {m.text}" for m in conversation)


def build_prompt(
    conversation: Sequence[ChatMessage],
    language_label: str,
    context: Optional[PatientContext],
    dialect: Optional[str],
    translated_text: str,
) -> str:
    context = context or PatientContext()
    sections = [
        SYSTEM_PROMPT,
        (
            "CONTEXT:\n"
            f"• Recovery phase: {context.phase}\n"
            f"• Weight lost: {context.weight_loss}\n"
            f"• Alert level: {context.alert_level}"
        ),
        LANGUAGE_POLICY.format(language=language_label),
        MEDICAL_SAFETY,
        f"Conversation:\n{render_transcript(conversation)}",
        (
            f"Detected dialect: {dialect or 'none'}\n"
            f"Translated text: {translated_text}\n"
            "Reply now in the detected or user language only."
        ),
    ]
    return "\n\n".join(sections)
