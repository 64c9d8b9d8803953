import logging
from typing import Any

from mockup_forge.errors import GenerationError, UnknownCategoryError
from mockup_forge.models import Attachment, GenerationRequest
from mockup_forge.workflow.generation import GenerationWorkflow

logger = logging.getLogger(__name__)
STAGES = ["classify", "build", "invoke", "sanitize"]


class GenerateService:
    def __init__(self, workflow: GenerationWorkflow | None = None) -> None:
        self.workflow = workflow or GenerationWorkflow()

    async def generate(
        self,
        idea: str,
        attachment: Attachment | None = None,
        category: str | None = None,
    ) -> dict:
        requested_category = (category or "").strip().lower() or None
        try:
            request = GenerationRequest(idea_text=idea, attachment=attachment)
            result = await self.workflow.run(request, category=requested_category)
            logger.info(
                "generate.done category=%s html_chars=%d attachment=%s",
                result.category.id,
                len(result.html),
                attachment is not None,
            )
            return {
                "html": result.html,
                "meta": {
                    "stages": STAGES,
                    "requested_category": requested_category,
                    "category": result.category.id,
                    "category_name": result.category.name,
                    "model": self.workflow.settings.gemini_model,
                    "attachment": attachment is not None,
                    "html_chars": len(result.html),
                },
            }
        except Exception as exc:
            logger.exception("generate.failed idea=%s", idea[:80])
            return {
                "html": "",
                "meta": {
                    "stages": STAGES,
                    "error": self._error_payload(exc),
                },
            }

    @staticmethod
    def _error_payload(exc: Exception) -> dict[str, Any]:
        hint = "Check the service logs for the llm.error entry"
        if isinstance(exc, UnknownCategoryError):
            hint = "Use one of the ids listed by GET /categories"
        elif isinstance(exc, GenerationError):
            hint = "Check GEMINI_API_KEY/GEMINI_BASE_URL/GEMINI_MODEL and network connectivity"
        return {
            "type": exc.__class__.__name__,
            "message": str(exc),
            "hint": hint,
        }
