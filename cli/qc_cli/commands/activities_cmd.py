from __future__ import annotations

import typer
from rich.table import Table
from qc_client import QcClientError

from .. import console
from ..config import load_config
from ..fields import parse_fields, ref_name
from ..formatting import relative_time
from ..http import fail, make_client

app = typer.Typer(help="Recent activity feed.")


@app.command("list")
def list_activities(
        limit: int = typer.Option(5, "--limit", help="Max activities to return."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.activities_list(limit=limit)
    except QcClientError as e:
        fail(e, "Failed to list activities")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Recent activity")
    table.add_column("when")
    table.add_column("user")
    table.add_column("action", style="bold")
    table.add_column("description")
    for a in data.get("items") or []:
        table.add_row(
            relative_time(a.get("createdAt")),
            ref_name(a.get("user")),
            str(a.get("action") or "-"),
            str(a.get("description") or "-"),
        )
    console.console.print(table)


@app.command("log")
def log_activity(
        action: str = typer.Argument(..., help="Action name, e.g. report_export."),
        description: str = typer.Argument(..., help="Human readable description."),
        meta: list[str] | None = typer.Option(None, "--meta", help="Metadata as key=value (repeatable)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    try:
        metadata = parse_fields(meta)
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.activity_log(action=action, description=description, metadata=metadata or None)
    except QcClientError as e:
        fail(e, "Failed to log activity")
    finally:
        client.close()

    console.ok("Activity logged.")


def analytics_impl(
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    """
    Print quality analytics computed by the backend.
    """
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.analytics()
    except QcClientError as e:
        fail(e, "Failed to fetch analytics")
    finally:
        client.close()

    console.print_json(data)
