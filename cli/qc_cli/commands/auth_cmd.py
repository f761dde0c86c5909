from __future__ import annotations

import typer
from qc_client import ApiError, QcClientError

from .. import console
from ..auth_state import ConfigTokenStore
from ..config import load_config, save_config
from ..formatting import format_member_since
from ..http import fail, make_client

app = typer.Typer(help="Auth commands.")


@app.command("login")
def login(
    name: str = typer.Option(..., "--name", prompt=True, help="User name for login."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Password for login."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        token = client.auth_login(name=name, password=password)
    except QcClientError as e:
        if isinstance(e, ApiError) and e.status_code == 401:
            console.err("Login failed: invalid credentials.")
            raise typer.Exit(code=2)
        fail(e, "Login failed")
    finally:
        client.close()

    if base_url:
        cfg.base_url = client.root
    cfg.auth.token = token
    cfg.auth.token_type = "bearer"
    save_path = save_config(cfg)
    console.ok(f"Login successful. Token saved to {save_path}.")


@app.command("logout", help="Log out on the server and clear the stored token.")
def logout(
    base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.auth_logout()
    except QcClientError as e:
        console.warn(f"Server logout failed: {e}")
    finally:
        client.close()

    ConfigTokenStore().delete()
    console.ok("Token cleared.")


@app.command("forgot-password")
def forgot_password(
    email: str = typer.Option(..., "--email", prompt=True, help="Account email."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.forgot_password(email=email)
    except QcClientError as e:
        fail(e, "Password reset request failed")
    finally:
        client.close()

    console.ok(str(data.get("message") or "Password reset email sent."))


@app.command("reset-password")
def reset_password(
    reset_token: str = typer.Argument(..., help="Token from the reset email."),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True, help="New password."
    ),
    base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.reset_password(reset_token, password=password)
    except QcClientError as e:
        fail(e, "Password reset failed")
    finally:
        client.close()

    console.ok(str(data.get("message") or "Password updated."))


def whoami_impl(
    base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
    json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """
    Show current authenticated user.
    """
    cfg = load_config()
    if not (cfg.auth.token or "").strip():
        console.err("Not authenticated. No token found.")
        console.hint("qc auth login")
        raise typer.Exit(code=2)

    client = make_client(cfg, base_url_override=base_url)
    try:
        me = client.me()
    except QcClientError as e:
        fail(e, "Failed to fetch current user")
    finally:
        client.close()

    if json_out:
        console.print_json(me)
        return
    console.rule("Whoami")
    console.console.print(f"[bold]Name:[/] {me.get('name') or '-'}")
    console.console.print(f"[bold]Email:[/] {me.get('email') or '-'}")
    console.console.print(f"[bold]Role:[/] {me.get('role') or '-'}")
    console.console.print(f"[bold]Department:[/] {me.get('department') or '-'}")
    console.console.print(f"[bold]Member since:[/] {format_member_since(me.get('createdAt'))}")
