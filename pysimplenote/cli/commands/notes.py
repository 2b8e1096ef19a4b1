"""Note commands for the pysimplenote CLI."""

import sys
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from pysimplenote.cli.utils import auth
from pysimplenote.cli.utils.editor import compose
from pysimplenote.exceptions import NotesAuthError, NotesError
from pysimplenote.services.notes import (
    Action,
    FormattedRecord,
    NotesResult,
    RequestDescriptor,
)
from pysimplenote.services.notes.presenter import TAG_PREFIX
from pysimplenote.services.notes.service import version_string

console = Console()

SEPARATOR = "-" * 34
HEADER_RULE = "=" * 34


def split_tags(words: Optional[List[str]]) -> Tuple[List[str], List[str]]:
    """Peel leading ``@tag`` words off ``words``; returns (tags, remaining words)."""
    tags: List[str] = []
    words = list(words or [])
    for i, word in enumerate(words):
        if word.startswith(TAG_PREFIX) and len(word) > len(TAG_PREFIX):
            tags.append(word[len(TAG_PREFIX) :])
        else:
            return tags, words[i:]
    return tags, []


def strip_tag_prefix(tag: str) -> str:
    return tag[len(TAG_PREFIX) :] if tag.startswith(TAG_PREFIX) else tag


def render_record(record: FormattedRecord) -> str:
    return (
        f"[red]{escape(record.key)}[/red]\n"
        f"[cyan]{escape(record.modified)}[/cyan] [blue]{escape(record.tags)}[/blue]\n"
        f"{escape(record.text)}\n"
        f"{SEPARATOR}"
    )


def render_list(records: List[FormattedRecord], email: str) -> None:
    console.print(f"Showing [blue]{len(records)}[/blue] notes for {escape(email)}:")
    console.print(HEADER_RULE)
    if not records:
        console.print("No Notes")
        return
    console.print("\n".join(render_record(r) for r in records))


def _run(
    ctx: typer.Context, request: RequestDescriptor, editor: Optional[str] = None
) -> NotesResult:
    """Validate, execute and report errors the way every command does."""
    opts = ctx.obj or {}
    try:
        request.validate()
        config = auth.get_config(opts.get("email"))
        service = auth.get_service(password=opts.get("password"), config=config)

        def _edit(content: str) -> str:
            return compose(content, editor=editor or config.editor)

        result = service.handle(request, editor=_edit)
    except NotesAuthError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        console.print(auth.auth_help_panel())
        raise typer.Exit(1) from e
    except NotesError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    if request.action is Action.LIST:
        render_list(result.records, config.email)
    else:
        for record in result.records:
            console.print(render_record(record))
        if result.message:
            console.print(result.message)
    return result


def new_note(
    ctx: typer.Context,
    words: Optional[List[str]] = typer.Argument(
        None, help="Leading @tags followed by the note text"
    ),
    editor: Optional[str] = typer.Option(None, help="Editor to compose the note in"),
):
    """Create a note from arguments, piped stdin, or the editor."""
    tags, rest = split_tags(words)
    if rest:
        content = " ".join(rest)
    elif not sys.stdin.isatty():
        content = sys.stdin.read()
    else:
        config = auth.get_config((ctx.obj or {}).get("email"))
        content = compose("", editor=editor or config.editor)

    if not content.strip():
        console.print("Empty note, nothing saved.")
        return
    _run(
        ctx,
        RequestDescriptor(action=Action.CREATE, content=content, tags=tags),
    )


def list_notes(
    ctx: typer.Context,
    tags: Optional[List[str]] = typer.Argument(
        None, help="Only show notes carrying any of these @tags"
    ),
    n: int = typer.Option(-1, "-n", help="Number of most recent notes to show"),
    deleted: bool = typer.Option(False, "--deleted", help="Include trashed notes"),
):
    """List notes, oldest first."""
    tag_list = [strip_tag_prefix(t) for t in tags or []]
    _run(
        ctx,
        RequestDescriptor(
            action=Action.LIST,
            tags=tag_list,
            flags={"n": str(n), "deleted": str(deleted).lower()},
        ),
    )


def get_note(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="32-character note key"),
):
    """Show a single note."""
    _run(ctx, RequestDescriptor(action=Action.GET, key=key))


def edit_note(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="32-character note key"),
    editor: Optional[str] = typer.Option(None, help="Editor to edit the note in"),
):
    """Edit a note in the editor and upload the result."""
    _run(ctx, RequestDescriptor(action=Action.EDIT, key=key), editor=editor)


def delete_note(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="32-character note key"),
    permanently: bool = typer.Option(
        False, "--permanently", help="Purge the note instead of moving it to trash"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Delete without confirmation"
    ),
):
    """Delete a note."""
    if permanently and not force:
        confirmed = typer.confirm(f"Are you sure you want to purge note {key}?")
        if not confirmed:
            console.print("Deletion cancelled")
            return
    _run(
        ctx,
        RequestDescriptor(
            action=Action.DELETE,
            key=key,
            flags={"permanently": str(permanently).lower()},
        ),
    )


def version():
    """Show the pysimplenote version."""
    console.print(version_string())
