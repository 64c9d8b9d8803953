import logging
from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage

from mockup_forge.config import Settings
from mockup_forge.errors import GenerationError
from mockup_forge.models import Attachment

logger = logging.getLogger(__name__)
ERROR_LOG_LIMIT = 1000


class GeminiProvider:
    """Single-shot Gemini calls through the OpenAI-compatible endpoint."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.model = settings.gemini_model
        self._llm: Any | None = None

    async def generate(
        self,
        prompt: str,
        system_instruction: str,
        attachment: Attachment | None = None,
    ) -> str:
        messages = [
            SystemMessage(content=system_instruction),
            HumanMessage(content=self._build_parts(prompt, attachment)),
        ]
        logger.info(
            "llm.request model=%s temperature=%.2f parts=%d attachment=%s prompt=%s",
            self.model,
            self.settings.llm_temperature,
            2 if attachment else 1,
            attachment.mime_type if attachment else "none",
            self._clip(prompt, self.settings.log_preview_chars),
        )
        try:
            llm = self._get_llm()
            response = await llm.ainvoke(messages)
        except Exception as exc:
            logger.error(
                "llm.error model=%s type=%s detail=%s",
                self.model,
                exc.__class__.__name__,
                self._extract_error_detail(exc),
            )
            raise GenerationError(f"generation failed: {exc.__class__.__name__}", cause=exc) from exc

        text = self._message_text(getattr(response, "content", response))
        logger.info(
            "llm.response model=%s chars=%d preview=%s",
            self.model,
            len(text),
            self._clip(text, self.settings.log_preview_chars),
        )
        return text

    @staticmethod
    def _build_parts(prompt: str, attachment: Attachment | None) -> list[dict[str, Any]]:
        parts: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        if attachment is not None:
            parts.append({"type": "image_url", "image_url": {"url": attachment.as_data_url()}})
        return parts

    def _get_llm(self):
        if self._llm is None:
            from langchain_openai import ChatOpenAI

            self._llm = ChatOpenAI(
                model=self.model,
                api_key=self.settings.gemini_api_key or None,
                base_url=self.settings.gemini_base_url,
                temperature=self.settings.llm_temperature,
                timeout=self.settings.llm_timeout_seconds,
                max_retries=self.settings.llm_num_retries,
            )
        return self._llm

    @staticmethod
    def _message_text(content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts: list[str] = []
            for item in content:
                if isinstance(item, dict):
                    if "text" in item:
                        parts.append(str(item["text"]))
                else:
                    parts.append(str(item))
            return "".join(parts)
        return str(content)

    @staticmethod
    def _clip(text: str, limit: int) -> str:
        normalized = " ".join(text.split()).strip()
        if len(normalized) <= limit:
            return normalized
        return f"{normalized[:limit]}...(truncated)"

    def _extract_error_detail(self, exc: Exception) -> str:
        status_code = getattr(exc, "status_code", None)
        message = getattr(exc, "message", None) or str(exc)
        body = getattr(exc, "body", None)
        details = [f"status_code={status_code}" if status_code is not None else ""]
        if body is not None:
            details.append(f"body={body}")
        details.append(f"message={message}")
        return self._clip(" ".join([part for part in details if part]).strip(), ERROR_LOG_LIMIT)
