from __future__ import annotations

import typer
from rich.table import Table
from qc_client import QcClientError

from .. import console
from ..config import load_config
from ..fields import parse_fields, record_id, ref_name
from ..formatting import format_date, format_datetime
from ..http import fail, make_client

app = typer.Typer(help="Defect log commands.")


def _body(fields: list[str] | None) -> dict:
    try:
        return parse_fields(fields)
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)


@app.command("list")
def list_defects(
        product: str | None = typer.Option(None, "--product", help="Filter by product id."),
        type_: str | None = typer.Option(None, "--type", help="Filter by defect type."),
        severity: str | None = typer.Option(None, "--severity", help="Filter by severity."),
        inspection: str | None = typer.Option(None, "--inspection", help="Filter by inspection id."),
        status: str | None = typer.Option(None, "--status", help="Filter by status."),
        root_cause: str | None = typer.Option(None, "--root-cause", help="Filter by root cause."),
        start_date: str | None = typer.Option(None, "--from", help="Created on or after (YYYY-MM-DD)."),
        end_date: str | None = typer.Option(None, "--to", help="Created on or before (YYYY-MM-DD)."),
        sort: str | None = typer.Option(None, "--sort", help="Sort expression, e.g. -createdAt."),
        page: int = typer.Option(1, "--page", help="Page number."),
        limit: int = typer.Option(10, "--limit", help="Page size."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.defects_list(
            product=product,
            type=type_,
            severity=severity,
            inspection=inspection,
            status=status,
            root_cause=root_cause,
            start_date=start_date,
            end_date=end_date,
            sort=sort,
            page=page,
            limit=limit,
        )
    except QcClientError as e:
        fail(e, "Failed to list defects")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    items = data.get("items") or []
    total = data.get("total")
    if total is not None:
        console.info(f"total={total} page={page} limit={limit}")

    table = Table(title="Defects")
    table.add_column("id", style="bold")
    table.add_column("type")
    table.add_column("severity")
    table.add_column("status")
    table.add_column("product")
    table.add_column("created")

    for d in items:
        table.add_row(
            record_id(d),
            str(d.get("type") or "-"),
            str(d.get("severity") or "-"),
            str(d.get("status") or "-"),
            ref_name(d.get("product")),
            format_date(d.get("createdAt")),
        )

    console.console.print(table)


@app.command("show")
def show_defect(
        defect_id: str = typer.Argument(..., help="Defect ID."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        defect = client.defect_get(defect_id)
    except QcClientError as e:
        fail(e, f"Failed to fetch defect {defect_id}")
    finally:
        client.close()

    if json_out:
        console.print_json(defect)
        return
    console.ok("Defect:")
    console.field("id", record_id(defect))
    console.field("type", defect.get("type"))
    console.field("severity", defect.get("severity"))
    console.field("status", defect.get("status"))
    console.field("product", ref_name(defect.get("product")))
    console.field("inspection", ref_name(defect.get("inspection")))
    console.field("root_cause", defect.get("rootCause"))
    console.field("description", defect.get("description"))
    console.field("created", format_datetime(defect.get("createdAt")))
    if defect.get("resolvedAt"):
        console.field("resolved", format_datetime(defect.get("resolvedAt")))


@app.command("create")
def create_defect(
        inspection: str = typer.Option(..., "--inspection", help="Inspection id."),
        product: str = typer.Option(..., "--product", help="Product id."),
        type_: str = typer.Option(..., "--type", help="Defect type."),
        severity: str = typer.Option(..., "--severity", help="Severity (low, medium, high, critical)."),
        description: str | None = typer.Option(None, "--description", help="Free text description."),
        field: list[str] | None = typer.Option(None, "--field", help="Extra field as key=value (repeatable)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = _body(field)
    body.update({"inspection": inspection, "product": product, "type": type_, "severity": severity})
    if description:
        body["description"] = description

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.defect_create(body)
    except QcClientError as e:
        fail(e, "Failed to log defect")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return
    console.ok(f"Defect logged: {record_id(data)}")


@app.command("update")
def update_defect(
        defect_id: str = typer.Argument(..., help="Defect ID."),
        status: str | None = typer.Option(None, "--status", help="New status."),
        severity: str | None = typer.Option(None, "--severity", help="New severity."),
        root_cause: str | None = typer.Option(None, "--root-cause", help="Root cause."),
        field: list[str] | None = typer.Option(None, "--field", help="Extra field as key=value (repeatable)."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    body = _body(field)
    if status:
        body["status"] = status
    if severity:
        body["severity"] = severity
    if root_cause:
        body["rootCause"] = root_cause
    if not body:
        console.err("Nothing to update.")
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.defect_update(defect_id, body)
    except QcClientError as e:
        fail(e, f"Failed to update defect {defect_id}")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return
    console.ok(f"Defect {defect_id} updated.")


@app.command("delete")
def delete_defect(
        defect_id: str = typer.Argument(..., help="Defect ID."),
        yes: bool = typer.Option(False, "--yes", help="Skip confirmation prompt."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    if not yes:
        if not typer.confirm(f"Delete defect {defect_id}?", default=False):
            console.info("Aborted.")
            raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.defect_delete(defect_id)
    except QcClientError as e:
        fail(e, f"Failed to delete defect {defect_id}")
    finally:
        client.close()

    console.ok(f"Defect {defect_id} deleted.")
