from dataclasses import dataclass

from mockup_forge.design.categories import CategoryProfile


@dataclass(frozen=True)
class Attachment:
    data: str
    mime_type: str

    def __post_init__(self) -> None:
        # Sent as an image_url part, which only carries images.
        if not self.mime_type.lower().startswith("image/"):
            raise ValueError(f"unsupported attachment type: {self.mime_type!r} (expected image/*)")

    def as_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class GenerationRequest:
    idea_text: str
    attachment: Attachment | None = None

    @classmethod
    def from_upload(
        cls,
        idea_text: str,
        file_base64: str | None = None,
        mime_type: str | None = None,
    ) -> "GenerationRequest":
        # A file without its MIME type (or the reverse) is dropped.
        attachment = Attachment(data=file_base64, mime_type=mime_type) if file_base64 and mime_type else None
        return cls(idea_text=idea_text, attachment=attachment)


@dataclass(frozen=True)
class GenerationResult:
    html: str
    category: CategoryProfile
    instruction: str
