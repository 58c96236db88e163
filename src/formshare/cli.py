from __future__ import annotations

from typing import Any, Optional

import httpx
import orjson
import typer

from formshare.client import ApiError, FormShareClient
from formshare.config import QUESTION_TYPES, Settings
from formshare.drafts import DraftStore, FormDraft

cli = typer.Typer(add_completion=False)
draft_cli = typer.Typer(add_completion=False, help="Edit local form drafts")
cli.add_typer(draft_cli, name="draft")


def _echo_json(value: Any) -> None:
    typer.echo(orjson.dumps(value, option=orjson.OPT_INDENT_2).decode("utf-8"))


def _draft_store() -> DraftStore:
    return DraftStore(Settings().draft_dir)


def _load_draft(store: DraftStore, draft_id: str) -> FormDraft:
    try:
        return store.load(draft_id)
    except orjson.JSONDecodeError:
        typer.echo(f"Draft file is unreadable: {draft_id}", err=True)
        raise typer.Exit(code=1)
    except ValueError:
        typer.echo(f"Invalid draft id: {draft_id}", err=True)
        raise typer.Exit(code=1)
    except KeyError:
        typer.echo(f"Draft not found: {draft_id}", err=True)
        raise typer.Exit(code=1)


def _server_url(server: str | None) -> str:
    return server or Settings().public_base_url


def run_server(host: str | None, port: int | None) -> None:
    import uvicorn

    from formshare.app import create_app

    settings = Settings()
    resolved_host = host or settings.host
    resolved_port = port if port is not None else settings.port
    uvicorn.run(
        create_app(settings),
        host=resolved_host,
        port=resolved_port,
        log_level=settings.log_level.lower(),
    )


@cli.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, help="Address to bind"),
    port: Optional[int] = typer.Option(None, help="Port to bind"),
) -> None:
    ctx.obj = {"host": host, "port": port}
    if ctx.invoked_subcommand is None:
        run_server(host, port)


@cli.command()
def run(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, help="Address to bind"),
    port: Optional[int] = typer.Option(None, help="Port to bind"),
) -> None:
    base = ctx.obj or {}
    resolved_host = host or base.get("host")
    resolved_port = port if port is not None else base.get("port")
    run_server(resolved_host, resolved_port)


@draft_cli.command("new")
def draft_new(
    title: str = typer.Option("Untitled Form", help="Form title"),
    description: str = typer.Option("Add a description for your form", help="Form description"),
) -> None:
    draft = FormDraft(title=title, description=description)
    _draft_store().save(draft)
    typer.echo(draft.id)


@draft_cli.command("add-question")
def draft_add_question(
    draft_id: str,
    question_type: str = typer.Argument(..., help="categorize, cloze or comprehension"),
    title: Optional[str] = typer.Option(None, help="Question title"),
    content: Optional[str] = typer.Option(None, help="Options prompt, cloze text or passage"),
    option: Optional[list[str]] = typer.Option(None, help="Category option, repeatable"),
) -> None:
    if question_type not in QUESTION_TYPES:
        typer.echo(f"Unknown question type: {question_type}", err=True)
        raise typer.Exit(code=2)
    store = _draft_store()
    draft = _load_draft(store, draft_id)
    draft = draft.add_question(question_type)
    question_id = draft.questions[-1].id
    changes: dict[str, Any] = {}
    if title is not None:
        changes["title"] = title
    if content is not None:
        changes["content"] = content
    if option:
        changes["options"] = option
    if changes:
        draft = draft.update_question(question_id, **changes)
    store.save(draft)
    typer.echo(question_id)


@draft_cli.command("show")
def draft_show(draft_id: str) -> None:
    draft = _load_draft(_draft_store(), draft_id)
    _echo_json(draft.to_dict())


@draft_cli.command("list")
def draft_list() -> None:
    for draft_id in _draft_store().list_ids():
        typer.echo(draft_id)


@cli.command()
def publish(
    draft_id: str,
    server: Optional[str] = typer.Option(None, help="Server base URL"),
) -> None:
    """Create a form on the server from a local draft."""
    draft = _load_draft(_draft_store(), draft_id)
    with FormShareClient(_server_url(server)) as client:
        try:
            created = client.create_form(draft.to_payload())
        except ApiError as exc:
            typer.echo(f"Failed to create form: {exc.message}", err=True)
            raise typer.Exit(code=1)
        except httpx.HTTPError as exc:
            typer.echo(f"Failed to create form: {exc}", err=True)
            raise typer.Exit(code=1)
    _echo_json(created)


@cli.command()
def responses(
    form_id: str,
    server: Optional[str] = typer.Option(None, help="Server base URL"),
) -> None:
    """Print the responses collected for a form."""
    with FormShareClient(_server_url(server)) as client:
        try:
            items = client.list_responses(form_id)
        except ApiError as exc:
            typer.echo(f"Failed to fetch responses: {exc.message}", err=True)
            raise typer.Exit(code=1)
        except httpx.HTTPError as exc:
            typer.echo(f"Failed to fetch responses: {exc}", err=True)
            raise typer.Exit(code=1)
    _echo_json(items)
