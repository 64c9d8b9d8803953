import base64
import binascii

from pydantic import BaseModel, Field, field_validator

from mockup_forge.models import Attachment


class AttachmentPayload(BaseModel):
    data: str = Field(..., min_length=1, description="Base64-encoded file contents.")
    mime_type: str = Field(
        ...,
        pattern=r"^image/[A-Za-z0-9.+-]+$",
        description="MIME type of the image, e.g. image/png.",
    )

    @field_validator("data")
    @classmethod
    def _check_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("data must be base64-encoded") from exc
        return value

    def to_attachment(self) -> Attachment:
        return Attachment(data=self.data, mime_type=self.mime_type)


class GenerateRequest(BaseModel):
    idea: str = Field(..., min_length=1, description="Free-text app idea.")
    attachment: AttachmentPayload | None = Field(default=None, description="Optional reference image.")
    category: str | None = Field(
        default=None,
        description="Optional category override, e.g. fintech/social/ecommerce/health/general.",
    )


class GenerateResponse(BaseModel):
    html: str
    meta: dict


class CategoryInfo(BaseModel):
    id: str
    name: str
    design_style: str
    key_features: str
    keywords: list[str]
