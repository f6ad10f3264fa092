"""Typer CLI for CSE Whiteboard."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="whiteboard", help="CSE Whiteboard: customer notes, to-dos and weekly reports")
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind host"),
    port: int = typer.Option(8080, help="Bind port"),
):
    """Start the CSE Whiteboard API server."""
    import uvicorn
    from cse_whiteboard.app import create_app

    console.print(f"[bold green]Starting CSE Whiteboard on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def token(
    user_id: str = typer.Argument(..., help="Opaque user id from the identity provider"),
):
    """Mint a signed identity token for local development."""
    from cse_whiteboard.common.security import create_identity_token

    console.print(create_identity_token(user_id))


@app.command()
def seed(
    user_id: str = typer.Argument(..., help="Owner of the demo records"),
):
    """Populate the database with demo customers and notes."""
    from cse_whiteboard.common.config import get_settings
    from cse_whiteboard.seed import seed_demo_data

    customers, notes = asyncio.run(seed_demo_data(get_settings(), user_id))
    console.print(f"[bold green]Seeded[/bold green] {customers} customers, {notes} notes for {user_id}")


@app.command()
def report(
    user_id: str = typer.Argument(..., help="Report owner"),
    week_ending: str = typer.Option(..., "--week-ending", help="Week ending date, YYYY-MM-DD"),
    summaries: bool = typer.Option(True, help="Request executive summaries"),
):
    """Print the weekly customer report as plain text."""
    from cse_whiteboard.common.config import get_settings
    from cse_whiteboard.common.database import DatabaseManager
    from cse_whiteboard.common.exceptions import WhiteboardError
    from cse_whiteboard.reports.service import ReportService
    from cse_whiteboard.reports.summarizer import SummaryClient

    settings = get_settings()

    async def _run() -> str:
        db = DatabaseManager(settings)
        await db.init()
        client = SummaryClient(settings) if settings.summaries_configured else None
        try:
            svc = ReportService(settings, summary_client=client)
            async with db.get_session() as session:
                weekly = await svc.get_weekly_report(
                    session, user_id, week_ending, include_summaries=summaries,
                )
                return weekly.render()
        finally:
            if client is not None:
                await client.close()
            await db.close()

    try:
        text = asyncio.run(_run())
    except WhiteboardError as e:
        console.print(f"[bold red]{e.code}[/bold red] — {e.message}")
        raise typer.Exit(1)
    console.print(text, markup=False, highlight=False)


@app.command()
def audit(
    user_id: str = typer.Argument(..., help="Acting user"),
    todo_id: Optional[int] = typer.Option(None, help="Only this todo"),
    action: Optional[str] = typer.Option(None, help="Filter by action, e.g. delete"),
    limit: int = typer.Option(20, help="Maximum rows"),
):
    """Show recent to-do audit log entries."""
    from cse_whiteboard.common.config import get_settings
    from cse_whiteboard.common.database import DatabaseManager
    from cse_whiteboard.audit.service import AuditService

    settings = get_settings()

    async def _run():
        db = DatabaseManager(settings)
        await db.init()
        try:
            svc = AuditService(settings)
            async with db.get_session() as session:
                if todo_id is not None:
                    return await svc.get_logs(
                        session, "todo", todo_id, action=action, limit=limit, user_id=user_id,
                    )
                return await svc.get_user_logs(session, "todo", user_id, action=action, limit=limit)
        finally:
            await db.close()

    entries = asyncio.run(_run())
    if not entries:
        console.print("No audit logs found.")
        return

    table = Table(title=f"Todo audit log ({len(entries)} entries)")
    for column in ("Action", "Todo", "Field", "Old", "New", "Time"):
        table.add_column(column)
    for e in entries:
        table.add_row(
            e.action.upper(), f"#{e.todo_id}", e.field_name or "N/A",
            e.old_value or "N/A", e.new_value or "N/A", e.created_at.isoformat(),
        )
    console.print(table)


def _print_counts(title: str, counts: dict[str, int]) -> None:
    table = Table(title=title)
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


@app.command("export")
def export_command(
    path: Path = typer.Argument(..., dir_okay=False, help="Destination JSON file"),
):
    """Dump customers, notes, todos and their audit logs to a JSON file."""
    from cse_whiteboard.common.config import get_settings
    from cse_whiteboard.common.database import DatabaseManager
    from cse_whiteboard.transfer import dumps, export_data

    settings = get_settings()

    async def _run():
        db = DatabaseManager(settings)
        await db.init()
        try:
            async with db.get_session() as session:
                return await export_data(session)
        finally:
            await db.close()

    data = asyncio.run(_run())
    path.write_text(dumps(data), encoding="utf-8")
    _print_counts(f"Exported to {path}", {name: len(rows) for name, rows in data.items()})


@app.command("import")
def import_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file written by export"),
):
    """Load an export into this database, assigning new ids."""
    from cse_whiteboard.common.config import get_settings
    from cse_whiteboard.common.database import DatabaseManager
    from cse_whiteboard.common.exceptions import WhiteboardError
    from cse_whiteboard.transfer import import_data

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {path} is not valid JSON: {e}")
        raise typer.Exit(1)

    settings = get_settings()

    async def _run():
        db = DatabaseManager(settings)
        await db.init()
        try:
            await db.create_all()
            async with db.get_session() as session:
                return await import_data(session, data)
        finally:
            await db.close()

    try:
        counts = asyncio.run(_run())
    except WhiteboardError as e:
        console.print(f"[bold red]{e.code}[/bold red] — {e.message}")
        raise typer.Exit(1)
    _print_counts(f"Imported from {path}", counts)


@app.command()
def health(
    url: str = typer.Option("http://localhost:8080", help="Server URL"),
):
    """Check CSE Whiteboard server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
