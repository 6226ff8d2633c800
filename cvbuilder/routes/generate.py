# cvbuilder/routes/generate.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from cvbuilder.core.config import Settings, get_settings
from cvbuilder.core.exceptions import ConfigurationError, CVBuilderError, RequestShapeError
from cvbuilder.routes.form_parser import is_multipart, parse_upload_form
from cvbuilder.routes.responses import CORS_HEADERS, json_response
from cvbuilder.schemas.base import ErrorResponse, ExtractionResult, GenerateResponse
from cvbuilder.services.extraction_service import DocumentExtractor
from cvbuilder.services.gemini_client import GeminiClient
from cvbuilder.services.pipeline import CVPipeline
from cvbuilder.services.synthesis_service import CVGenerator
from cvbuilder.utils.analytics import track
from cvbuilder.utils.timing import timed

logger = logging.getLogger(__name__)

router = APIRouter()


# -------------------- collaborators --------------------
def get_gemini_client(cfg: Settings = Depends(get_settings)) -> GeminiClient:
    return GeminiClient(
        api_key=cfg.gemini_api_key or "",
        base_url=cfg.gemini_base_url,
        timeout=cfg.request_timeout_seconds,
    )

def get_extractor(
    client: GeminiClient = Depends(get_gemini_client),
    cfg: Settings = Depends(get_settings),
) -> DocumentExtractor:
    return DocumentExtractor.from_settings(client, cfg)

def get_generator(
    client: GeminiClient = Depends(get_gemini_client),
    cfg: Settings = Depends(get_settings),
) -> CVGenerator:
    return CVGenerator(client, cfg)


# -------------------- routes --------------------
@router.options("/ocr-extract", include_in_schema=False)
async def ocr_extract_preflight():
    return PlainTextResponse("ok", status_code=200, headers=CORS_HEADERS)

@router.post(
    "/ocr-extract",
    summary="Build CV + cover letter from uploaded documents",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ocr_extract(
    request: Request,
    cfg: Settings = Depends(get_settings),
    extractor: DocumentExtractor = Depends(get_extractor),
    generator: CVGenerator = Depends(get_generator),
):
    track(request, cfg, "generate_requested")

    # ---- request-level validation (nothing is processed before these pass) ----
    if not cfg.has_provider_key:
        logger.error("GEMINI_API_KEY is not set; refusing to process uploads")
        raise ConfigurationError("AI provider is not configured: GEMINI_API_KEY is missing")
    if not is_multipart(request.headers.get("content-type")):
        raise RequestShapeError("Invalid content type. Expected multipart/form-data")

    files, job_ad = await parse_upload_form(request, cfg.job_ad_field, cfg.max_file_bytes)
    if not files:
        raise RequestShapeError("No valid files provided. Please upload PDF, DOCX, JPG, or PNG files.")

    def _file_failed(result: ExtractionResult) -> None:
        track(request, cfg, "file_extraction_failed", {"type": result.mime_type, "skipped": result.skipped})

    pipeline = CVPipeline(extractor, generator, cfg, on_file_failed=_file_failed)
    try:
        with timed(logger, f"ocr-extract ({len(files)} files)"):
            out = await pipeline.run(files, job_ad)
    except CVBuilderError as e:
        track(request, cfg, "generate_failed", {"error": type(e).__name__})
        raise

    processed = [
        {"name": r.name, "type": r.mime_type, "size": f.size}
        for f, r in zip(files, out.results)
        if not r.skipped
    ]
    track(request, cfg, "generate_success", {"files": len(files), "ats_score": out.synthesis.generated_content.get("atsScore")})
    # raw dicts on purpose: generated fields are passed through as the model produced them
    return json_response({
        "success": True,
        "extractedData": out.synthesis.extracted_data,
        "generatedContent": out.synthesis.generated_content,
        "jobAdData": job_ad.model_dump() if job_ad else None,
        "filesProcessed": processed,
        "aiPowered": True,
    })
