import logging
from typing import Any

from mockup_forge.config import Settings, get_settings
from mockup_forge.design.categories import CategoryProfile, classify, get_profile
from mockup_forge.design.instructions import SYSTEM_INSTRUCTION, build_instruction
from mockup_forge.design.sanitize import sanitize
from mockup_forge.models import GenerationRequest, GenerationResult
from mockup_forge.providers.llm.gemini import GeminiProvider

logger = logging.getLogger(__name__)


class GenerationWorkflow:
    """classify -> build -> invoke -> sanitize, run as LangGraph nodes."""

    def __init__(self, settings: Settings | None = None, llm_provider: GeminiProvider | None = None) -> None:
        self.settings = settings or get_settings()
        self.llm_provider = llm_provider or GeminiProvider(self.settings)

    async def run(self, request: GenerationRequest, category: str | None = None) -> GenerationResult:
        override = get_profile(category) if category else None
        return await self._run_with_langgraph_async(request, override)

    async def _run_with_langgraph_async(
        self,
        request: GenerationRequest,
        override: CategoryProfile | None,
    ) -> GenerationResult:
        from typing import TypedDict
        from langgraph.graph import END, START, StateGraph

        class WorkflowState(TypedDict):
            request: GenerationRequest
            category: CategoryProfile | None
            instruction: str
            raw_text: str
            html: str

        async def classify_step(state: WorkflowState) -> dict[str, Any]:
            logger.info("classify")
            profile = state["category"] or classify(state["request"].idea_text)
            logger.info(
                "category resolved=%s override=%s",
                profile.id,
                state["category"] is not None,
            )
            return {"category": profile}

        async def build_step(state: WorkflowState) -> dict[str, Any]:
            logger.info("build")
            return {"instruction": build_instruction(state["request"].idea_text, state["category"])}

        async def invoke_step(state: WorkflowState) -> dict[str, Any]:
            logger.info("invoke")
            text = await self.llm_provider.generate(
                state["instruction"],
                SYSTEM_INSTRUCTION,
                attachment=state["request"].attachment,
            )
            return {"raw_text": text}

        async def sanitize_step(state: WorkflowState) -> dict[str, Any]:
            logger.info("sanitize")
            return {"html": sanitize(state["raw_text"])}

        graph = StateGraph(WorkflowState)
        graph.add_node("classify_step", classify_step)
        graph.add_node("build_step", build_step)
        graph.add_node("invoke_step", invoke_step)
        graph.add_node("sanitize_step", sanitize_step)
        graph.add_edge(START, "classify_step")
        graph.add_edge("classify_step", "build_step")
        graph.add_edge("build_step", "invoke_step")
        graph.add_edge("invoke_step", "sanitize_step")
        graph.add_edge("sanitize_step", END)

        app = graph.compile()
        try:
            final_state = await app.ainvoke(
                {
                    "request": request,
                    "category": override,
                    "instruction": "",
                    "raw_text": "",
                    "html": "",
                }
            )
        except Exception as exc:
            logger.error("generation.failed type=%s detail=%s", exc.__class__.__name__, exc)
            raise

        return GenerationResult(
            html=final_state["html"],
            category=final_state["category"],
            instruction=final_state["instruction"],
        )


_default_workflow: GenerationWorkflow | None = None


async def bring_to_life(
    idea_text: str,
    file_base64: str | None = None,
    mime_type: str | None = None,
    workflow: GenerationWorkflow | None = None,
) -> str:
    """Turn an app idea (and optional reference file) into the design-board HTML."""
    global _default_workflow
    if workflow is None:
        if _default_workflow is None:
            _default_workflow = GenerationWorkflow()
        workflow = _default_workflow
    request = GenerationRequest.from_upload(idea_text, file_base64, mime_type)
    result = await workflow.run(request)
    return result.html
