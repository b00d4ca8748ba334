from __future__ import annotations

from typing import Optional, Sequence

from assistant.core.schemas import ChatMessage, DialectMatch, Glossary


def latest_user_text(conversation: Sequence[ChatMessage]) -> str:
    for message in reversed(conversation or []):
        if message.role == "user":
            return message.text
    return ""


def match_dialect(text: str, glossary: Glossary) -> Optional[DialectMatch]:
    """Return the first dialect whose trigger phrase occurs in ``text``.

    Dialects and their triggers are scanned in mapping order and the first
    case-insensitive substring hit wins, even when a later trigger is a
    longer or better fit. The canonical phrase keeps its stored casing.
    """
    lowered = (text or "").lower()
    for dialect, phrases in (glossary or {}).items():
        for trigger, canonical in phrases.items():
            if trigger.lower() in lowered:
                return DialectMatch(dialect=dialect, canonical_phrase=canonical)
    return None
