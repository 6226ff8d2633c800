# cvbuilder/routes/form_parser.py
from __future__ import annotations
import json
import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.requests import Request

from cvbuilder.schemas.base import JobAdData, UploadedFile

logger = logging.getLogger(__name__)


def is_multipart(content_type: Optional[str]) -> bool:
    return "multipart/form-data" in (content_type or "").lower()


def parse_job_ad(raw: Optional[str]) -> Optional[JobAdData]:
    if not raw or not raw.strip():
        return None
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("job ad must be a JSON object")
        return JobAdData.model_validate(data)
    except (ValueError, ValidationError) as e:  # JSONDecodeError is a ValueError
        logger.warning("Could not parse job ad data, continuing without it: %s", e)
        return None


async def parse_upload_form(
    request: Request,
    job_ad_field: str = "job_ad_text",
    max_file_bytes: Optional[int] = None,
) -> Tuple[List[UploadedFile], Optional[JobAdData]]:
    """Collect every non-empty file part (any field name) in order, plus the optional job ad.

    Parts larger than max_file_bytes are kept with their size but their bytes are never read.
    """
    form = await request.form()
    files: List[UploadedFile] = []
    job_ad: Optional[JobAdData] = None
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if max_file_bytes is not None and value.size is not None and value.size > max_file_bytes:
                    files.append(UploadedFile(
                        name=value.filename or key,
                        content_type=value.content_type or "",
                        size=value.size,
                        data=b"",
                    ))
                    continue
                data = await value.read()
                if not data:
                    continue
                files.append(UploadedFile(
                    name=value.filename or key,
                    content_type=value.content_type or "",
                    size=len(data),
                    data=data,
                ))
            elif key == job_ad_field:
                job_ad = parse_job_ad(value)
    finally:
        await form.close()
    return files, job_ad
