"""CLI entrypoints for blogagent."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from blogagent.analysis.document_analyzer import analyze_document
from blogagent.config import load_settings
from blogagent.logging import configure_logging, get_logger
from blogagent.models.request import AgentRequest
from blogagent.orchestrator.pipeline import AgentOrchestrator

app = typer.Typer(add_completion=False, help="Automated blog document editing pipeline")
logger = get_logger(__name__)


def _load_document(path: Path) -> tuple[list[Any], str | None]:
    """Read editor blocks from a JSON file.

    Accepts either a bare block array or an object with ``content`` (and optional ``title``).
    """

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return data, None
    if isinstance(data, dict) and isinstance(data.get("content"), list):
        title = data.get("title")
        return data["content"], title if isinstance(title, str) else None
    raise typer.BadParameter(f"{path} must contain a block array or an object with a 'content' array")


@app.command()
def edit(
    instruction: str = typer.Argument(..., help="Free-text edit instruction"),
    document: Path = typer.Option(..., "--document", "-d", exists=True, dir_okay=False, help="Document JSON file"),
    title: str | None = typer.Option(None, "--title", help="Post title (defaults to the document's title)"),
    user_id: str = typer.Option("local", "--user-id", help="User id used for style profiling"),
    post_id: str | None = typer.Option(None, "--post-id", help="Post id (defaults to the file stem)"),
    conversation_id: str | None = typer.Option(None, "--conversation-id", help="Continue an existing conversation"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the response JSON here"),
) -> None:
    """Run one edit instruction against a document and print the response JSON."""

    settings = load_settings()
    configure_logging(settings.log_level)

    blocks, doc_title = _load_document(document)
    request = AgentRequest(
        message=instruction,
        post_id=post_id or document.stem,
        current_content=blocks,
        current_title=title or doc_title or "",
        user_id=user_id,
        conversation_id=conversation_id,
    )

    logger.info("CLI edit requested")
    response = AgentOrchestrator.from_settings(settings).execute_sync(request)
    payload = json.dumps(response.model_dump(mode="json"), ensure_ascii=False, indent=2)

    if output is None:
        typer.echo(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload, encoding="utf-8")
    typer.echo(str(output))


@app.command()
def analyze(
    document: Path = typer.Argument(..., exists=True, dir_okay=False, help="Document JSON file"),
) -> None:
    """Print the outline, sections and stats of a document."""

    blocks, _ = _load_document(document)
    structure = analyze_document(blocks)
    typer.echo(json.dumps(structure.model_dump(mode="json"), ensure_ascii=False, indent=2))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Enable auto-reload (dev)"),
) -> None:
    """Start the HTTP API."""

    from blogagent.api.serve import main

    main(host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
