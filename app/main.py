from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging
from pydantic import BaseModel, Field

from assistant.assistant import ReplyOrchestrator
from assistant.core.errors import ConfigurationError
from assistant.core.schemas import ChatMessage, PatientContext
from assistant.store.firestore import FirestoreGlossaryStore
from config.settings import Settings, get_settings


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("postcare")

app = FastAPI(title="AI PostCare Assistant", version="1.0.0")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class AskRequest(BaseModel):
    messages: List[ChatMessage] = Field(
        ..., min_length=1, description="Full conversation, oldest first (frontend-managed)"
    )
    lang: Optional[str] = Field(None, description="Preferred language code, 'auto' by default")
    context: Optional[PatientContext] = None


def _error(error: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": error, "details": details},
        headers=CORS_HEADERS,
    )


def get_orchestrator(settings: Settings = Depends(get_settings)) -> ReplyOrchestrator:
    return ReplyOrchestrator(settings=settings, store=FirestoreGlossaryStore(settings))


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected request to %s: %s", request.url.path, exc.errors())
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    return _error("Invalid request body", details)


@app.options("/ask")
def ask_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@app.post("/ask")
def ask(req: AskRequest, orchestrator: ReplyOrchestrator = Depends(get_orchestrator)):
    settings = orchestrator.settings
    logger.info(
        "Config: model=%s key_set=%s",
        settings.gemini_model,
        bool(settings.gemini_api_key),
    )
    logger.info(
        "Incoming ask: messages=%s lang=%s context=%s",
        len(req.messages),
        req.lang,
        req.context is not None,
    )

    try:
        result = orchestrator.reply(req.messages, req.lang, req.context)
    except ConfigurationError as e:
        logger.error("Ask rejected: %s", e)
        return _error(f"Server missing {e.setting}", str(e))
    except Exception as e:
        logger.exception("AI PostCare reply failed: %s", e)
        return _error("Failed to generate AI response", str(e))

    body: Dict[str, Any] = {
        "reply": result.reply_text,
        "dialectDetected": result.detected_dialect,
    }
    return JSONResponse(content=body, headers=CORS_HEADERS)


@app.get("/health")
def health():
    return {"status": "ok"}
