import asyncio
import logging

import pytest

from mockup_forge.design.instructions import SYSTEM_INSTRUCTION
from mockup_forge.design.sanitize import FALLBACK_PLACEHOLDER
from mockup_forge.errors import GenerationError, UnknownCategoryError
from mockup_forge.models import Attachment, GenerationRequest
from mockup_forge.providers.llm.gemini import GeminiProvider
from mockup_forge.workflow.generation import GenerationWorkflow, bring_to_life


class _StubProvider:
    def __init__(self, response: str | None = "```html\n<html>OK</html>\n```", exc: Exception | None = None) -> None:
        self.response = response
        self.exc = exc
        self.calls: list[dict] = []

    async def generate(self, prompt: str, system_instruction: str, attachment: Attachment | None = None) -> str | None:
        self.calls.append({"prompt": prompt, "system_instruction": system_instruction, "attachment": attachment})
        if self.exc is not None:
            raise self.exc
        return self.response


def test_fitness_idea_end_to_end() -> None:
    provider = _StubProvider()
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]

    result = asyncio.run(workflow.run(GenerationRequest(idea_text="A fitness tracking app for runners")))

    assert result.category.id == "health"
    assert "CATEGORY: Health" in result.instruction
    assert "Progress rings, activity charts" in result.instruction
    assert len(provider.calls) == 1
    assert provider.calls[0]["prompt"] == result.instruction
    assert provider.calls[0]["system_instruction"] == SYSTEM_INSTRUCTION
    assert provider.calls[0]["attachment"] is None
    assert result.html == "<html>OK</html>"


def test_stages_log_in_order(caplog) -> None:
    workflow = GenerationWorkflow(llm_provider=_StubProvider())  # type: ignore[arg-type]

    with caplog.at_level(logging.INFO):
        asyncio.run(workflow.run(GenerationRequest(idea_text="chat app")))

    messages = [record.getMessage() for record in caplog.records]
    assert (
        messages.index("classify")
        < messages.index("build")
        < messages.index("invoke")
        < messages.index("sanitize")
    )


def test_attachment_is_forwarded() -> None:
    provider = _StubProvider()
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]
    attachment = Attachment(data="aGVsbG8=", mime_type="image/jpeg")

    asyncio.run(workflow.run(GenerationRequest(idea_text="store", attachment=attachment)))

    assert provider.calls[0]["attachment"] == attachment


def test_category_override_skips_classification() -> None:
    workflow = GenerationWorkflow(llm_provider=_StubProvider())  # type: ignore[arg-type]

    result = asyncio.run(workflow.run(GenerationRequest(idea_text="crypto wallet"), category="Social"))

    assert result.category.id == "social"
    assert "CATEGORY: Social" in result.instruction


def test_unknown_category_override_raises_before_remote_call() -> None:
    provider = _StubProvider()
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]

    with pytest.raises(UnknownCategoryError):
        asyncio.run(workflow.run(GenerationRequest(idea_text="anything"), category="gaming"))
    assert provider.calls == []


def test_empty_response_yields_placeholder() -> None:
    workflow = GenerationWorkflow(llm_provider=_StubProvider(response=""))  # type: ignore[arg-type]
    result = asyncio.run(workflow.run(GenerationRequest(idea_text="todo")))
    assert result.html == FALLBACK_PLACEHOLDER


def test_remote_failure_propagates_unchanged(caplog) -> None:
    error = GenerationError("generation failed: ConnectionError", cause=ConnectionError("down"))
    provider = _StubProvider(exc=error)
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]

    with caplog.at_level(logging.ERROR), pytest.raises(GenerationError) as excinfo:
        asyncio.run(workflow.run(GenerationRequest(idea_text="bank app")))

    assert excinfo.value is error
    assert len(provider.calls) == 1
    assert any("generation.failed" in record.getMessage() for record in caplog.records)


def test_bring_to_life_returns_html() -> None:
    provider = _StubProvider()
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]

    html = asyncio.run(bring_to_life("A fitness tracking app for runners", "aGVsbG8=", "image/png", workflow=workflow))

    assert html == "<html>OK</html>"
    assert provider.calls[0]["attachment"] == Attachment(data="aGVsbG8=", mime_type="image/png")


def test_bring_to_life_drops_file_without_mime_type() -> None:
    provider = _StubProvider()
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]

    asyncio.run(bring_to_life("shop", "aGVsbG8=", None, workflow=workflow))

    assert provider.calls[0]["attachment"] is None


def test_default_provider_is_gemini() -> None:
    workflow = GenerationWorkflow()
    assert isinstance(workflow.llm_provider, GeminiProvider)


def test_bring_to_life_rejects_non_image_file() -> None:
    provider = _StubProvider()
    workflow = GenerationWorkflow(llm_provider=provider)  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="application/pdf"):
        asyncio.run(bring_to_life("shop", "aGk=", "application/pdf", workflow=workflow))
    assert provider.calls == []
