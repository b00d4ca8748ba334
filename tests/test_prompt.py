import pytest

from assistant.core.prompt import (
    SUPPORTED_LANGUAGES,
    build_prompt,
    render_transcript,
    resolve_language,
)
from assistant.core.schemas import ChatMessage, PatientContext


@pytest.mark.parametrize(
    "code, expected",
    [
        ("pcm", ("pcm", "Nigerian Pidgin")),
        ("yo", ("yo", "Yoruba")),
        ("auto", ("auto", "Auto")),
        ("xx", ("auto", "Auto")),
        ("", ("auto", "Auto")),
        (None, ("auto", "Auto")),
    ],
)
def test_resolve_language(code, expected):
    assert resolve_language(code) == expected


def test_supported_languages_cover_dialects():
    assert {"pcm", "ig", "ha", "yo", "gl"} <= set(SUPPORTED_LANGUAGES)


def test_render_transcript_labels_roles():
    conversation = [
        ChatMessage(role="user", text="I dey tire"),
        ChatMessage(role="assistant", text="Rest well"),
    ]
    assert render_transcript(conversation) == "USER: I dey tire\nASSISTANT: Rest well"


def test_build_prompt_with_dialect():
    prompt = build_prompt(
        [ChatMessage(role="user", text="I dey tire for body")],
        language_label="Nigerian Pidgin",
        context=PatientContext(phase="Phase 2 – Purees", weightLoss="12 kg", alertLevel="Watch"),
        dialect="pcm",
        translated_text="I am tired",
    )
    assert prompt.startswith("You are AI PostCare")
    assert "Requested language: Nigerian Pidgin." in prompt
    assert "• Recovery phase: Phase 2 – Purees" in prompt
    assert "• Weight lost: 12 kg" in prompt
    assert "• Alert level: Watch" in prompt
    assert "USER: I dey tire for body" in prompt
    assert "Detected dialect: pcm" in prompt
    assert "Translated text: I am tired" in prompt


def test_build_prompt_defaults():
    prompt = build_prompt(
        [ChatMessage(role="user", text="hello")],
        language_label="Auto",
        context=None,
        dialect=None,
        translated_text="hello",
    )
    assert "• Recovery phase: Phase 3 – Solid Foods" in prompt
    assert "• Weight lost: 25 kg" in prompt
    assert "• Alert level: Stable" in prompt
    assert "Detected dialect: none" in prompt
    assert "Translated text: hello" in prompt


def test_blank_context_fields_take_defaults():
    context = PatientContext.model_validate({"phase": "", "weightLoss": None, "alertLevel": "High"})
    assert context.phase == "Phase 3 – Solid Foods"
    assert context.weight_loss == "25 kg"
    assert context.alert_level == "High"
