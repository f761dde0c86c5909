from __future__ import annotations

import typer
from qc_client import QcClientError

from .. import console
from ..config import load_config
from ..http import fail, make_client

app = typer.Typer(help="AI defect detection (runs on the backend).")


@app.command("detect")
def detect(
        image: str = typer.Argument(..., help="Image file to analyse."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.ai_detect(image)
    except QcClientError as e:
        fail(e, "Detection failed")
    except OSError as e:
        console.err(f"Failed to read image: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    detection = data.get("detection") or {}
    has_defect = bool(detection.get("hasDefect"))
    console.rule("Detection")
    console.console.print(f"[bold]Status:[/] {'Defective' if has_defect else 'Good'}")
    console.console.print(f"[bold]Type:[/] {detection.get('defectType') or '-'}")
    console.console.print(f"[bold]Confidence:[/] {detection.get('confidence') or '-'}")


@app.command("data")
def ai_data(
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.ai_data()
    except QcClientError as e:
        fail(e, "Failed to fetch detection history")
    finally:
        client.close()

    console.print_json(data)
