from __future__ import annotations

import typer
from rich.table import Table
from qc_client import QcClientError

from .. import console
from ..config import load_config
from ..fields import record_id
from ..http import fail, make_client

app = typer.Typer(help="Product catalogue.")


@app.command("list")
def list_products(
        limit: int | None = typer.Option(None, "--limit", help="Max products to return."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.products_list(limit=limit)
    except QcClientError as e:
        fail(e, "Failed to list products")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Products")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("code")
    table.add_column("category")
    for p in data.get("items") or []:
        table.add_row(
            record_id(p),
            str(p.get("name") or "-"),
            str(p.get("code") or p.get("sku") or "-"),
            str(p.get("category") or "-"),
        )
    console.console.print(table)
