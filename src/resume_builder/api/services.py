"""Process-wide collaborators shared by the request handlers."""

from __future__ import annotations

import os
from dataclasses import dataclass

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import AppConfig
from resume_builder.monitoring.api_monitor import APIMonitor
from resume_builder.pipeline.enhancer import ProfileEnhancer
from resume_builder.pipeline.generator import ResumeGenerator
from resume_builder.pipeline.section_refiner import SectionRefiner
from resume_builder.storage.resume_store import ResumeStore


@dataclass
class Services:
    config: AppConfig
    monitor: APIMonitor
    store: ResumeStore
    enhancer: ProfileEnhancer
    generator: ResumeGenerator | None = None  # None when no API key is configured
    refiner: SectionRefiner | None = None


def build_services(
    config: AppConfig,
    *,
    llm: LLMClient | None = None,
    monitor: APIMonitor | None = None,
    store: ResumeStore | None = None,
) -> Services:
    """Wire the pipeline objects for one process.

    A model client is created only when ``ANTHROPIC_API_KEY`` is set (or one
    is passed in); without it generation and refinement are unavailable and
    profile enhancement uses its offline fallback.
    """
    if monitor is None:
        monitor = APIMonitor(
            backup_window_minutes=config.monitor.backup_window_minutes,
            backup_threshold=config.monitor.backup_threshold,
        )
    if store is None:
        store = ResumeStore(config.storage.resolved_db_path)
    if llm is None and os.environ.get("ANTHROPIC_API_KEY"):
        llm = LLMClient(
            timeout=config.llm.timeout,
            monitor=monitor,
            max_retries=config.llm.max_retries,
            retry_delay_base_ms=config.llm.retry_delay_base_ms,
            retry_delay_max_ms=config.llm.retry_delay_max_ms,
        )

    services = Services(
        config=config,
        monitor=monitor,
        store=store,
        enhancer=ProfileEnhancer(llm, model=config.llm.enhance_model),
    )
    if llm is not None:
        services.generator = ResumeGenerator(
            llm,
            primary_model=config.llm.primary_model,
            fallback_model=config.llm.fallback_model,
            default_retry_after=config.llm.default_retry_after,
        )
        services.refiner = SectionRefiner(
            llm,
            model=config.llm.fallback_model,
            default_retry_after=config.llm.default_retry_after,
        )
    return services
