# cvbuilder/services/pipeline.py
"""
Per-request orchestration: extract every upload, aggregate, synthesize once.

The pipeline knows nothing about HTTP. It receives already-parsed uploads and
the collaborators it needs (encoder, extractor, generator), which keeps it easy
to drive from tests with fakes.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from fastapi.concurrency import run_in_threadpool

from cvbuilder.core.config import Settings
from cvbuilder.core.exceptions import ExtractionError, FailureReason, GenerationError, NoUsableContentError
from cvbuilder.schemas.base import ExtractionResult, JobAdData, SynthesisResult, UploadedFile
from cvbuilder.utils.encoding import to_base64
from cvbuilder.utils.mime import PDF_MIME, is_supported, resolve_mime_type
from cvbuilder.utils.text_decode import decode_text, is_substantive

logger = logging.getLogger(__name__)

OVERSIZE_TEXT = "[Skipped: file exceeds the {limit} MB size limit]"
FAILED_TEXT = "[Could not extract text from this file: {detail}]"


class Extractor(Protocol):
    async def extract(self, encoded: str, mime_type: str) -> str: ...


class Generator(Protocol):
    async def generate(self, extracted_text: str, job: Optional[JobAdData] = None) -> SynthesisResult: ...


@dataclass
class PipelineOutput:
    results: List[ExtractionResult]
    synthesis: SynthesisResult


def aggregate(results: List[ExtractionResult]) -> str:
    return "\n\n".join(r.section() for r in results)


class CVPipeline:
    def __init__(
        self,
        extractor: Extractor,
        generator: Generator,
        cfg: Settings,
        encoder: Callable[[bytes], str] = to_base64,
        on_file_failed: Optional[Callable[[ExtractionResult], None]] = None,
    ):
        self.extractor = extractor
        self.generator = generator
        self.cfg = cfg
        self.encoder = encoder
        self.on_file_failed = on_file_failed

    def _limit_mb(self) -> str:
        return f"{self.cfg.max_file_bytes / (1024 * 1024):g}"

    async def extract_one(self, upload: UploadedFile) -> ExtractionResult:
        if upload.size > self.cfg.max_file_bytes:
            logger.warning("Skipping %s: %d bytes is over the limit", upload.name, upload.size)
            return ExtractionResult(
                name=upload.name,
                text=OVERSIZE_TEXT.format(limit=self._limit_mb()),
                mime_type=upload.content_type,
                ok=False,
                skipped=True,
            )

        mime_type = resolve_mime_type(upload.content_type, upload.name)
        if not is_supported(mime_type):
            # docx parsing and base64 of large files stay off the event loop
            decoded = await run_in_threadpool(decode_text, upload.data, upload.name, mime_type)
            if is_substantive(decoded, self.cfg.min_decoded_text_chars):
                logger.info("Read %d chars from %s (%s) locally", len(decoded), upload.name, mime_type)
                return ExtractionResult(name=upload.name, text=decoded, mime_type=mime_type, ok=True)
            # last resort: let the model try it as a PDF
            logger.info("%s has unsupported type %s; sending as PDF", upload.name, mime_type)
            mime_type = PDF_MIME

        encoded = await run_in_threadpool(self.encoder, upload.data)
        try:
            text = await self.extractor.extract(encoded, mime_type)
        except ExtractionError as e:
            logger.warning("Extraction failed for %s (%s): %s", upload.name, e.reason.value, e)
            return ExtractionResult(
                name=upload.name,
                text=FAILED_TEXT.format(detail=e.message),
                mime_type=mime_type,
                ok=False,
            )
        except Exception as e:
            logger.exception("Unexpected error extracting %s", upload.name)
            return ExtractionResult(
                name=upload.name,
                text=FAILED_TEXT.format(detail=e),
                mime_type=mime_type,
                ok=False,
            )
        logger.info("Extracted %d chars from %s", len(text), upload.name)
        return ExtractionResult(name=upload.name, text=text, mime_type=mime_type, ok=True)

    async def extract_all(self, uploads: List[UploadedFile]) -> List[ExtractionResult]:
        sem = asyncio.Semaphore(max(1, self.cfg.extraction_concurrency))

        async def task(upload: UploadedFile) -> ExtractionResult:
            async with sem:
                result = await self.extract_one(upload)
            if not result.ok and self.on_file_failed:
                self.on_file_failed(result)
            return result

        # gather keeps input order regardless of completion order
        return list(await asyncio.gather(*[task(u) for u in uploads]))

    async def run(self, uploads: List[UploadedFile], job: Optional[JobAdData] = None) -> PipelineOutput:
        logger.info("Processing %d files", len(uploads))
        results = await self.extract_all(uploads)

        if not any(r.ok for r in results):
            raise NoUsableContentError(
                "No usable content could be extracted from the uploaded files",
                details="; ".join(r.text for r in results),
            )

        logger.info("Generating CV and cover letter from %d sections", len(results))
        try:
            synthesis = await self.generator.generate(aggregate(results), job)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Failed to generate CV content: {e}", reason=FailureReason.UNKNOWN) from e
        return PipelineOutput(results=results, synthesis=synthesis)
