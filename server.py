#!/usr/bin/env python3
"""FastAPI server exposing the template registry and renderer."""

import asyncio
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from pdf_renderer import render_pdf
from schemas import RenderRequest, RenderResponse, TemplateInfo
from template_registry import TemplateNotFoundError, get_template, list_templates, render_document

log = logging.getLogger(__name__)

load_dotenv()

app = FastAPI(title="DocGen API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/api/health")
async def health():
    return {"status": "ok", "templates": len(list_templates())}


@app.get("/api/templates")
async def templates() -> list[TemplateInfo]:
    """List every registered template with its declared inputs."""
    return list_templates()


@app.get("/api/templates/{name}")
async def template_detail(name: str) -> TemplateInfo:
    try:
        return get_template(name).info()
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail=f"Template not found: {name}")


@app.post("/api/preview")
async def preview(request: RenderRequest) -> RenderResponse:
    """Compose the content tree without rendering a PDF."""
    try:
        document = render_document(request.template, request.inputs)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail=f"Template not found: {request.template}")
    return RenderResponse(status=document.status, document=document)


@app.post("/api/render")
async def render(request: RenderRequest):
    """Compose and render a PDF.

    Input warnings are returned in the X-Render-Warnings header as a count;
    use /api/preview for the full list.
    """
    try:
        document = render_document(request.template, request.inputs)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail=f"Template not found: {request.template}")

    pdf = await asyncio.to_thread(render_pdf, document)
    log.info("Rendered %s for API request (%d bytes)", document.template, len(pdf))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"inline; filename={document.template}.pdf",
            "X-Render-Status": document.status.value,
            "X-Render-Warnings": str(len(document.warnings)),
        },
    )


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
