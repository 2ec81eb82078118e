"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import load_config
from resume_builder.errors import (
    ExtractionFailed,
    GenerationFailed,
    InvalidSource,
    QuotaExceeded,
    ScrapeFailed,
)
from resume_builder.models.resume import ResumeDraft
from resume_builder.parsers.jd_parser import load_jd_file
from resume_builder.parsers.profile_parser import extract_profile_from_pdf
from resume_builder.pipeline.enhancer import ProfileEnhancer
from resume_builder.pipeline.generator import ResumeGenerator
from resume_builder.pipeline.import_mapper import build_import_preview
from resume_builder.scrapers.profile_scraper import scrape_profile

app = typer.Typer(
    name="resume-builder",
    help="AI resume builder: generation, LinkedIn import and the HTTP API",
    no_args_is_help=True,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from resume_builder.api.app import create_app

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    uvicorn.run(create_app(load_config(config_path)), host=host, port=port)


@app.command("import-profile")
def import_profile(
    pdf: Path = typer.Option(None, "--pdf", help="LinkedIn 'Save to PDF' export"),
    url: str = typer.Option(None, "--url", help="Public LinkedIn profile URL"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
) -> None:
    """Extract a LinkedIn profile, enhance it and preview the mapped resume."""
    if not pdf and not url:
        console.print("[red]Provide either --pdf or --url[/red]")
        raise typer.Exit(1)
    if pdf and not pdf.exists():
        console.print(f"[red]File not found: {pdf}[/red]")
        raise typer.Exit(1)

    config = load_config(config_path)
    limits = config.importer

    try:
        if url:
            with console.status("Loading profile page..."):
                extracted = asyncio.run(
                    scrape_profile(url, timeout_ms=limits.page_timeout_ms, settle_ms=limits.settle_ms)
                )
        else:
            data = pdf.read_bytes()
            if len(data) > limits.max_file_size_bytes:
                console.print(f"[red]File size exceeds {limits.max_file_size_mb}MB limit[/red]")
                raise typer.Exit(1)
            extracted = extract_profile_from_pdf(data)
    except (InvalidSource, ExtractionFailed, ScrapeFailed) as e:
        console.print(f"[red]Import failed: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Extracted profile")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Name", extracted.name or "[dim]-[/dim]")
    table.add_row("Headline", extracted.headline or "[dim]-[/dim]")
    table.add_row("Experience", str(len(extracted.experience)))
    table.add_row("Education", str(len(extracted.education)))
    table.add_row("Skills", ", ".join(extracted.skills) or "[dim]-[/dim]")
    console.print(table)

    llm = LLMClient(timeout=config.llm.timeout) if _has_api_key() else None
    enhancer = ProfileEnhancer(llm, model=config.llm.enhance_model)
    with console.status("Enhancing profile..."):
        enhanced = asyncio.run(enhancer.enhance(extracted))

    if enhanced.error:
        console.print(f"[yellow]{enhanced.error}: {enhanced.details}[/yellow]")
    console.print(Panel(enhanced.summary, title="Summary", border_style="blue"))

    preview = build_import_preview(extracted, enhanced)
    if preview.is_valid:
        console.print("[green]Ready to import[/green]")
    else:
        for error in preview.errors:
            console.print(f"  [red]- {error}[/red]")
    for suggestion in preview.suggestions:
        console.print(f"  [dim]* {suggestion}[/dim]")


@app.command()
def generate(
    draft: Path = typer.Argument(help="Resume draft JSON file"),
    jd: Path = typer.Option(..., "--jd", help="Job description text file"),
    output: Path = typer.Option(None, "--output", "-o", help="Write generated content as JSON"),
    config_path: Path = typer.Option(None, "--config", "-c", help="config.yaml path"),
) -> None:
    """Generate ATS-optimized content for a resume draft."""
    for path in (draft, jd):
        if not path.exists():
            console.print(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)

    try:
        resume_data = ResumeDraft.model_validate_json(draft.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]Invalid resume draft: {draft}[/red]")
        console.print(str(e), markup=False)
        raise typer.Exit(1)
    jd_text = load_jd_file(jd)
    if not jd_text.strip():
        console.print("[red]Job description is required[/red]")
        raise typer.Exit(1)

    if not _has_api_key():
        console.print("[red]ANTHROPIC_API_KEY is not set[/red]")
        raise typer.Exit(1)

    config = load_config(config_path)

    generator = ResumeGenerator(
        LLMClient(
            timeout=config.llm.timeout,
            max_retries=config.llm.max_retries,
            retry_delay_base_ms=config.llm.retry_delay_base_ms,
            retry_delay_max_ms=config.llm.retry_delay_max_ms,
        ),
        primary_model=config.llm.primary_model,
        fallback_model=config.llm.fallback_model,
        default_retry_after=config.llm.default_retry_after,
    )

    try:
        with console.status("Generating content..."):
            content = asyncio.run(generator.generate(resume_data, jd_text))
    except QuotaExceeded as e:
        console.print(
            f"[yellow]API quota exceeded. Try again in {e.retry_after_seconds}s.[/yellow]"
        )
        raise typer.Exit(2)
    except GenerationFailed as e:
        console.print(f"[red]Generation failed: {e.details}[/red]")
        raise typer.Exit(1)

    console.print(Panel(content.summary, title="Summary", border_style="blue"))
    for exp in content.experiences:
        bullets = "\n".join(f"  - {b}" for b in exp.bullet_points)
        console.print(Panel(bullets, title=exp.id, border_style="cyan"))
    if content.skills.technical or content.skills.soft:
        console.print(f"[bold]Technical:[/bold] {', '.join(content.skills.technical)}")
        console.print(f"[bold]Soft:[/bold] {', '.join(content.skills.soft)}")
    for suggestion in content.suggestions:
        console.print(f"  [dim]* {suggestion}[/dim]")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(
            json.dumps(content.to_wire(), ensure_ascii=False, indent=2), encoding="utf-8"
        )
        console.print(f"\n[green]Saved: {output}[/green]")


def _has_api_key() -> bool:
    return bool(os.environ.get("ANTHROPIC_API_KEY"))


if __name__ == "__main__":
    app()
