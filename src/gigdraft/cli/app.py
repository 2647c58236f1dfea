from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from gigdraft.api.app import create_app
from gigdraft.config import get_settings
from gigdraft.context import AppContext
from gigdraft.core.draft_pipeline import DraftGenerator
from gigdraft.core.job_sync import FreelancerClient, sync_jobs
from gigdraft.core.resume_pipeline import ResumeProcessor, resume_path_for
from gigdraft.db.repositories import JobRepository
from gigdraft.errors import GigdraftError
from gigdraft.logging_config import configure_logging
from gigdraft.types import DraftRequest, JobDetails

app = typer.Typer(help="Gigdraft CLI")
jobs_app = typer.Typer(help="Job posting ingestion")
resume_app = typer.Typer(help="Resume upload and processing")
draft_app = typer.Typer(help="Application drafts")

app.add_typer(jobs_app, name="jobs")
app.add_typer(resume_app, name="resume")
app.add_typer(draft_app, name="draft")

_CONTEXT: AppContext | None = None


def get_context() -> AppContext:
    global _CONTEXT
    if _CONTEXT is None:
        settings = get_settings()
        configure_logging(settings)
        _CONTEXT = AppContext.from_settings(settings)
    return _CONTEXT


def _fail(exc: GigdraftError) -> None:
    typer.echo(json.dumps(exc.to_payload(), indent=2), err=True)
    raise typer.Exit(code=1)


def _resume_processor(context: AppContext) -> ResumeProcessor:
    return ResumeProcessor(
        documents=context.documents,
        objects=context.objects,
        extractor=context.extractor,
        completion=context.completion,
    )


@app.command("init")
def init_cmd() -> None:
    """Create data directories and database tables."""
    context = get_context()
    typer.echo(json.dumps({"ok": True, "database_url": context.settings.database_url}, indent=2))


@jobs_app.command("sync")
def jobs_sync(keep_existing: bool = typer.Option(False, "--keep-existing")) -> None:
    context = get_context()
    settings = context.settings
    try:
        client = FreelancerClient(
            settings.freelancer_api_url,
            settings.freelancer_api_key,
            timeout_sec=settings.freelancer_timeout_sec,
        )
        with context.sessions() as db:
            result = sync_jobs(client, JobRepository(db), replace=not keep_existing)
    except GigdraftError as exc:
        _fail(exc)
    typer.echo(result.model_dump_json(indent=2))


@jobs_app.command("list")
def jobs_list(limit: int = typer.Option(20, "--limit")) -> None:
    context = get_context()
    with context.sessions() as db:
        jobs = JobRepository(db).list_jobs(limit=limit)
        typer.echo(
            json.dumps(
                [
                    {
                        "id": job.id,
                        "title": job.title,
                        "skills": job.skills,
                        "budget": [job.budget_min, job.budget_max, job.currency],
                        "posted_at": job.posted_at.isoformat() if job.posted_at else None,
                    }
                    for job in jobs
                ],
                indent=2,
            )
        )


@resume_app.command("upload")
def resume_upload(
    user_id: str = typer.Option(..., "--user-id"),
    file: Path = typer.Option(..., "--file", exists=True, readable=True),
) -> None:
    """Store a resume PDF and run processing as the upload hook would."""
    context = get_context()
    object_path = resume_path_for(user_id)
    context.objects.upload(object_path, file.read_bytes())
    try:
        result = _resume_processor(context).handle_object_finalized(object_path)
    except GigdraftError as exc:
        _fail(exc)
    typer.echo(result.model_dump_json(by_alias=True, indent=2) if result else "{}")


@resume_app.command("process")
def resume_process(user_id: str = typer.Option(..., "--user-id")) -> None:
    context = get_context()
    try:
        result = _resume_processor(context).process_for_caller(user_id)
    except GigdraftError as exc:
        _fail(exc)
    typer.echo(result.model_dump_json(by_alias=True, indent=2))


@draft_app.command("generate")
def draft_generate(
    user_id: str = typer.Option(..., "--user-id"),
    job_id: int = typer.Option(..., "--job-id"),
) -> None:
    context = get_context()
    with context.sessions() as db:
        job = JobRepository(db).get_job(job_id)
        if job is None:
            raise typer.BadParameter(f"job {job_id} not found")
        details = JobDetails(title=job.title, description=job.description, skills=job.skills)

    generator = DraftGenerator(documents=context.documents, completion=context.completion)
    try:
        result = generator.generate(DraftRequest(user_id=user_id, job_details=details))
    except GigdraftError as exc:
        _fail(exc)
    typer.echo(result.draft)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    context = get_context()
    settings = context.settings
    uvicorn.run(create_app(context), host=host or settings.app_host, port=port or settings.app_port)
