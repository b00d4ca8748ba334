from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Sequence

import httpx
from google.api_core import exceptions as google_exceptions
from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from assistant.core.dialect import latest_user_text, match_dialect
from assistant.core.errors import (
    ConfigurationError,
    GlossaryReadError,
    LearningWriteError,
    UpstreamError,
    UpstreamTimeout,
)
from assistant.core.prompt import build_prompt, resolve_language
from assistant.core.schemas import (
    AssistantReply,
    ChatMessage,
    Glossary,
    LearningRecord,
    PatientContext,
)
from assistant.store.firestore import GlossaryStore
from config.settings import Settings


logger = logging.getLogger("postcare.assistant")

LLMFactory = Callable[[Settings], BaseChatModel]


def build_llm(settings: Settings) -> BaseChatModel:
    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY")

    options: Dict[str, Any] = {}
    if settings.gemini_base_url:
        options["base_url"] = settings.gemini_base_url

    return ChatGoogleGenerativeAI(
        model=settings.gemini_model,
        google_api_key=settings.gemini_api_key,
        temperature=settings.temperature,
        top_p=settings.top_p,
        timeout=settings.model_timeout,
        max_retries=settings.model_max_retries,
        **options,
    )


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text") or "")
        content = "".join(parts)
    return (content or "").strip()


TIMEOUT_ERRORS = (TimeoutError, httpx.TimeoutException, google_exceptions.DeadlineExceeded)


def _is_timeout(exc: BaseException) -> bool:
    # Timeouts may arrive wrapped by the SDK.
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, TIMEOUT_ERRORS):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


class ReplyOrchestrator:
    """Produces one assistant reply for a conversation.

    Holds no state between calls: the glossary is read on every reply and
    the model client is built per call from the injected settings.
    """

    def __init__(
        self,
        settings: Settings,
        store: GlossaryStore,
        llm_factory: LLMFactory = build_llm,
    ) -> None:
        self.settings = settings
        self.store = store
        self.llm_factory = llm_factory

    def load_glossary(self) -> Glossary:
        try:
            return self.store.load_glossary()
        except GlossaryReadError as exc:
            logger.warning("Glossary unavailable, continuing without dialect detection: %s", exc)
            return {}

    def generate(self, prompt: str) -> str:
        llm = self.llm_factory(self.settings)
        try:
            result = llm.invoke(prompt)
        except Exception as exc:
            if _is_timeout(exc):
                raise UpstreamTimeout(
                    f"Model call timed out after {self.settings.model_timeout}s: {exc}"
                ) from exc
            raise UpstreamError(f"Model call failed: {exc}") from exc
        return _message_text(result)

    def record_learning(self, text: str, dialect: str, reply: str) -> Optional[str]:
        try:
            doc_id = self.store.save_learning(
                LearningRecord(text=text, detected_lang=dialect, reply=reply)
            )
        except LearningWriteError:
            logger.exception("Failed to save dialect learning record (dialect=%s)", dialect)
            return None
        logger.info("Saved dialect learning record id=%s dialect=%s", doc_id, dialect)
        return doc_id

    def reply(
        self,
        conversation: Sequence[ChatMessage],
        language_preference: Optional[str] = None,
        patient_context: Optional[PatientContext] = None,
    ) -> AssistantReply:
        if not self.settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY")

        glossary = self.load_glossary()
        lang_code, lang_label = resolve_language(language_preference)

        user_text = latest_user_text(conversation).lower()
        match = match_dialect(user_text, glossary)
        dialect = match.dialect if match else None
        translated_text = match.canonical_phrase if match else user_text
        logger.info(
            "Dialect scan: glossary_dialects=%s lang=%s detected=%s",
            len(glossary),
            lang_code,
            dialect,
        )

        prompt = build_prompt(
            conversation,
            language_label=lang_label,
            context=patient_context,
            dialect=dialect,
            translated_text=translated_text,
        )
        reply_text = self.generate(prompt)
        logger.info("Model responded with %s chars", len(reply_text))

        if dialect and translated_text != user_text:
            self.record_learning(user_text, dialect, reply_text)

        return AssistantReply(reply_text=reply_text, detected_dialect=dialect)
