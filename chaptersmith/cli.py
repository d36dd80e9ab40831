"""``flask manuscript`` commands for working with projects from a terminal."""
from __future__ import annotations

from pathlib import Path

import click
from flask.cli import AppGroup

from .errors import ChapterSmithError
from .services.chapters import list_chapters
from .services.manuscript import ManuscriptExportError, export_manuscript, write_manuscript

manuscript_cli = AppGroup("manuscript", help="Inspect and export project manuscripts.")


@manuscript_cli.command("status")
@click.argument("project_id", type=int)
def status_command(project_id: int) -> None:
    """Show the state of every chapter in PROJECT_ID."""

    try:
        chapters = list_chapters(project_id)
    except ChapterSmithError as exc:
        raise click.ClickException(exc.message) from exc

    for chapter in chapters:
        click.echo(
            f"Chapter {chapter.number}: {chapter.title or '-'} "
            f"[{chapter.status}, {chapter.pov_used or 'auto'}, {chapter.word_count or 0} words]"
        )


@manuscript_cli.command("export")
@click.argument("project_id", type=int)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory the manuscript file is written to.",
)
def export_command(project_id: int, output_dir: Path) -> None:
    """Write the saved chapters of PROJECT_ID to a Markdown file."""

    try:
        manuscript = export_manuscript(project_id)
        path = write_manuscript(manuscript, output_dir)
    except ChapterSmithError as exc:
        raise click.ClickException(exc.message) from exc
    except ManuscriptExportError as exc:
        raise click.ClickException(str(exc)) from exc

    count = len(manuscript.chapter_numbers)
    click.echo(f"Exported {count} chapter{'s' if count != 1 else ''} to {path}.")
    if manuscript.missing_chapters:
        missing = ", ".join(str(number) for number in manuscript.missing_chapters)
        click.echo(f"Skipped unsaved chapters: {missing}.")
