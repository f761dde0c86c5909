from __future__ import annotations

import typer
from rich.table import Table
from qc_client import QcClientError

from .. import console
from ..config import load_config
from ..fields import parse_fields, record_id, ref_name
from ..formatting import format_date
from ..http import fail, make_client

app = typer.Typer(help="Inspection scheduling commands.")


def _body(fields: list[str] | None) -> dict:
    try:
        return parse_fields(fields)
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)


@app.command("list")
def list_inspections(
        limit: int = typer.Option(100, "--limit", help="Max inspections to return."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.inspections_list(limit=limit)
    except QcClientError as e:
        fail(e, "Failed to list inspections")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Inspections")
    table.add_column("id", style="bold")
    table.add_column("date")
    table.add_column("product")
    table.add_column("batch")
    table.add_column("inspector")
    table.add_column("inspected", justify="right")
    table.add_column("defects", justify="right")
    table.add_column("status")

    for i in data.get("items") or []:
        table.add_row(
            record_id(i),
            format_date(i.get("date")),
            ref_name(i.get("product")),
            str(i.get("batchNumber") or "-"),
            ref_name(i.get("inspector")),
            str(i.get("totalInspected", "-")),
            str(i.get("defectsFound", "-")),
            str(i.get("status") or "-"),
        )

    console.console.print(table)


@app.command("create")
def create_inspection(
        product: str = typer.Option(..., "--product", help="Product id."),
        date: str = typer.Option(..., "--date", help="Scheduled date (YYYY-MM-DD)."),
        batch_number: str | None = typer.Option(None, "--batch", help="Batch number."),
        field: list[str] | None = typer.Option(None, "--field", help="Extra field as key=value (repeatable)."),
        image: list[str] | None = typer.Option(None, "--image", help="Image file to attach (repeatable)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = _body(field)
    body.update({"product": product, "date": date})
    if batch_number:
        body["batchNumber"] = batch_number

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.inspection_create(body)
        inspection_id = record_id(data)
        if image:
            client.inspection_upload_images(inspection_id, image)
    except QcClientError as e:
        fail(e, "Failed to schedule inspection")
    except OSError as e:
        console.err(f"Failed to read image: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return
    console.ok(f"Inspection scheduled: {inspection_id}")
    if image:
        console.info(f"{len(image)} image(s) uploaded.")


@app.command("update")
def update_inspection(
        inspection_id: str = typer.Argument(..., help="Inspection ID."),
        status: str | None = typer.Option(None, "--status", help="New status."),
        field: list[str] | None = typer.Option(None, "--field", help="Field as key=value (repeatable)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = _body(field)
    if status:
        body["status"] = status
    if not body:
        console.err("Nothing to update.")
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.inspection_update(inspection_id, body)
    except QcClientError as e:
        fail(e, f"Failed to update inspection {inspection_id}")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return
    console.ok(f"Inspection {inspection_id} updated.")


@app.command("delete")
def delete_inspection(
        inspection_id: str = typer.Argument(..., help="Inspection ID."),
        yes: bool = typer.Option(False, "--yes", help="Skip confirmation prompt."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    if not yes:
        if not typer.confirm(f"Delete inspection {inspection_id}?", default=False):
            console.info("Aborted.")
            raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.inspection_delete(inspection_id)
    except QcClientError as e:
        fail(e, f"Failed to delete inspection {inspection_id}")
    finally:
        client.close()

    console.ok(f"Inspection {inspection_id} deleted.")
