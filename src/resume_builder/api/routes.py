"""HTTP endpoints for the resume builder UI."""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from resume_builder.api.services import Services
from resume_builder.errors import (
    ExtractionFailed,
    GenerationFailed,
    InvalidSource,
    QuotaExceeded,
    ScrapeFailed,
)
from resume_builder.models.generation import GenerationRequest
from resume_builder.models.jobs import JobDescriptionRecord
from resume_builder.models.refinement import RefineRequest
from resume_builder.models.resume import ResumePayload
from resume_builder.parsers.jd_parser import extract_keywords, extract_requirements, parse_jd
from resume_builder.parsers.profile_parser import extract_profile_from_pdf, read_pdf_text
from resume_builder.pipeline.generator import build_generation_record
from resume_builder.scrapers.profile_scraper import scrape_profile

logger = logging.getLogger(__name__)

router = APIRouter()

QUOTA_ERROR_MESSAGE = "API quota exceeded. Please try again later."
GENERAL_ERROR_MESSAGE = "Failed to generate resume content. Please try again."
REFINE_ERROR_MESSAGE = "Failed to refine section"
NOT_CONFIGURED = "AI service is not configured"
QUOTA_DETAILS = (
    "The AI service is temporarily unavailable due to rate limits. "
    "Please wait a few minutes before trying again."
)

PDF_MIME_TYPE = "application/pdf"
TEXT_MIME_TYPE = "text/plain"


def get_services(request: Request) -> Services:
    return request.app.state.services


def current_user(request: Request, services: Services = Depends(get_services)) -> str:
    """User id set by the upstream identity proxy."""
    user_id = request.headers.get(services.config.auth.user_header, "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def _error(status: int, error: str, details: str | None = None, **extra) -> JSONResponse:
    body: dict = {"error": error}
    if details is not None:
        body["details"] = details
    body.update(extra)
    return JSONResponse(body, status_code=status)


def _quota_response(exc: QuotaExceeded) -> JSONResponse:
    response = _error(
        429,
        QUOTA_ERROR_MESSAGE,
        exc.details or QUOTA_DETAILS,
        retryAfter=exc.retry_after_seconds,
    )
    response.headers["Retry-After"] = str(exc.retry_after_seconds)
    return response


# --- Generation ---


@router.post("/api/generate-resume")
async def generate_resume(
    body: GenerationRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    if not body.job_description.strip():
        return _error(400, "Job description is required")
    if services.generator is None:
        return _error(500, GENERAL_ERROR_MESSAGE, NOT_CONFIGURED)

    try:
        content = await services.generator.generate(body.resume_data, body.job_description)
    except QuotaExceeded as exc:
        logger.warning("Generation rate-limited for user %s", user_id)
        return _quota_response(exc)
    except GenerationFailed as exc:
        logger.error("Error generating resume: %s", exc.details)
        return _error(500, GENERAL_ERROR_MESSAGE, "An unexpected error occurred. Please try again.")

    record = build_generation_record(user_id, body.resume_data, body.job_description, content)
    await asyncio.to_thread(services.store.save_generation, record)
    return {"success": True, "data": content.to_wire()}


# --- LinkedIn import ---


@router.post("/api/linkedin-import")
async def linkedin_import(
    url: str | None = Form(None),
    file: UploadFile | None = File(None),
    services: Services = Depends(get_services),
):
    url = (url or "").strip()
    if not url and file is None:
        return _error(400, "Please provide either a LinkedIn URL or PDF file")

    limits = services.config.importer
    try:
        if url:
            extracted = await scrape_profile(
                url, timeout_ms=limits.page_timeout_ms, settle_ms=limits.settle_ms
            )
        else:
            data = await file.read()
            if len(data) > limits.max_file_size_bytes:
                return _error(400, f"File size exceeds {limits.max_file_size_mb}MB limit")
            if file.content_type != PDF_MIME_TYPE:
                return _error(400, "Only PDF files are allowed")
            extracted = await asyncio.to_thread(extract_profile_from_pdf, data)
    except InvalidSource as exc:
        return _error(400, str(exc))
    except (ExtractionFailed, ScrapeFailed) as exc:
        logger.error("LinkedIn import error: %s", exc)
        return _error(500, "Import failed", str(exc))
    except Exception as exc:
        logger.exception("Unexpected LinkedIn import failure")
        return _error(500, "Import failed", str(exc))

    enhanced = await services.enhancer.enhance(extracted)
    return {
        "success": True,
        "extracted": extracted.to_wire(),
        "aiEnhanced": enhanced.to_wire(),
    }


@router.get("/api/linkedin-import")
async def linkedin_import_health():
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "environment": {"hasAnthropicKey": bool(os.environ.get("ANTHROPIC_API_KEY"))},
    }


# --- Section refinement ---


@router.post("/api/refine-section")
async def refine_section(body: RefineRequest, services: Services = Depends(get_services)):
    if services.refiner is None:
        return _error(500, REFINE_ERROR_MESSAGE, NOT_CONFIGURED)
    try:
        result = await services.refiner.refine(body)
    except QuotaExceeded as exc:
        return _quota_response(exc)
    except GenerationFailed as exc:
        return _error(500, REFINE_ERROR_MESSAGE, exc.details)
    return result.to_wire()


# --- Job descriptions ---


@router.post("/api/upload-job-description")
async def upload_job_description(
    file: UploadFile | None = File(None),
    text_content: str | None = Form(None, alias="textContent"),
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    content = text_content or ""
    if file is not None:
        data = await file.read()
        if file.content_type == TEXT_MIME_TYPE:
            content = data.decode("utf-8", errors="replace")
        elif file.content_type == PDF_MIME_TYPE:
            try:
                content = await asyncio.to_thread(read_pdf_text, data)
            except ExtractionFailed as exc:
                return _error(400, str(exc))
        else:
            return _error(400, "Only PDF or plain-text files are allowed")

    content = parse_jd(content)
    if not content:
        return _error(400, "Job description text is required")

    record = JobDescriptionRecord(
        user_id=user_id,
        content=content,
        keywords=extract_keywords(content),
        requirements=extract_requirements(content),
    )
    await asyncio.to_thread(services.store.save_job_description, record)
    return {
        "success": True,
        "jobDescription": content,
        "keywords": record.keywords,
        "requirements": record.requirements,
        "message": "Job description processed successfully",
    }


# --- Saved resumes ---


@router.get("/api/resumes")
async def list_resumes(
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    resumes = await asyncio.to_thread(services.store.list_resumes, user_id)
    return {"resumes": [r.to_wire() for r in resumes]}


@router.post("/api/resumes")
async def create_resume(
    body: ResumePayload,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    resume = await asyncio.to_thread(services.store.create_resume, user_id, body.title, body.data)
    return {
        "success": True,
        "resume": {
            "id": resume.id,
            "title": resume.title,
            "createdAt": resume.created_at.isoformat(),
            "updatedAt": resume.updated_at.isoformat(),
        },
    }


@router.get("/api/resumes/{resume_id}")
async def get_resume(
    resume_id: str,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    resume = await asyncio.to_thread(services.store.get_resume, user_id, resume_id)
    if resume is None:
        return _error(404, "Resume not found")
    return {"resume": resume.to_wire()}


@router.put("/api/resumes/{resume_id}")
async def update_resume(
    resume_id: str,
    body: ResumePayload,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    resume = await asyncio.to_thread(
        services.store.update_resume, user_id, resume_id, body.title, body.data
    )
    if resume is None:
        return _error(404, "Resume not found")
    return {"success": True, "resume": resume.to_wire()}


@router.delete("/api/resumes/{resume_id}")
async def delete_resume(
    resume_id: str,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    deleted = await asyncio.to_thread(services.store.delete_resume, user_id, resume_id)
    if not deleted:
        return _error(404, "Resume not found")
    return {"success": True}


# --- Operations ---


@router.get("/api/metrics")
async def metrics(services: Services = Depends(get_services)):
    return services.monitor.snapshot()


@router.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
