import logging

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from mockup_forge.api.schemas import CategoryInfo, GenerateRequest, GenerateResponse
from mockup_forge.design.categories import CATEGORY_PROFILES
from mockup_forge.design.sanitize import FALLBACK_PLACEHOLDER
from mockup_forge.service.generator import GenerateService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="mockup-forge", version="0.1.0")
service = GenerateService()


@app.get("/healthz")
async def healthz() -> dict:
    return {"status": "ok"}


@app.get("/categories", response_model=list[CategoryInfo])
async def categories() -> list[CategoryInfo]:
    return [
        CategoryInfo(
            id=profile.id,
            name=profile.name,
            design_style=profile.design_style,
            key_features=profile.key_features,
            keywords=list(profile.keywords),
        )
        for profile in CATEGORY_PROFILES.values()
    ]


async def _run(req: GenerateRequest) -> dict:
    attachment = req.attachment.to_attachment() if req.attachment else None
    return await service.generate(req.idea, attachment=attachment, category=req.category)


@app.post("/generate", response_model=GenerateResponse)
async def generate(req: GenerateRequest) -> GenerateResponse:
    result = await _run(req)
    return GenerateResponse(**result)


@app.post("/generate/html", response_class=HTMLResponse)
async def generate_html(req: GenerateRequest) -> HTMLResponse:
    result = await _run(req)
    if "error" in result["meta"]:
        return HTMLResponse(content=FALLBACK_PLACEHOLDER, status_code=502)
    return HTMLResponse(content=result["html"])
