from __future__ import annotations

import typer
from rich.table import Table
from qc_client import QcClientError

from .. import console
from ..config import load_config
from ..fields import parse_fields, record_id
from ..formatting import format_member_since
from ..http import fail, make_client

app = typer.Typer(help="User management commands (admin only).")


@app.command("list")
def list_users(
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.users_list()
    except QcClientError as e:
        fail(e, "Failed to list users")
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Users")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("email")
    table.add_column("role")
    table.add_column("department")
    table.add_column("status")

    for u in data.get("items") or []:
        table.add_row(
            record_id(u),
            str(u.get("name") or "-"),
            str(u.get("email") or "-"),
            str(u.get("role") or "-"),
            str(u.get("department") or "-"),
            str(u.get("status") or "-"),
        )

    console.console.print(table)


@app.command("show")
def show_user(
        user_id: str = typer.Argument(..., help="User ID."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        user = client.user_get(user_id)
    except QcClientError as e:
        fail(e, f"Failed to fetch user {user_id}")
    finally:
        client.close()

    console.ok("User:")
    console.field("id", record_id(user))
    console.field("name", user.get("name"))
    console.field("email", user.get("email"))
    console.field("role", user.get("role"))
    console.field("department", user.get("department"))
    console.field("member_since", format_member_since(user.get("createdAt")))


@app.command("create")
def create_user(
        name: str = typer.Option(..., "--name", help="User name."),
        email: str = typer.Option(..., "--email", help="Email address."),
        password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Initial password."),
        role: str = typer.Option("inspector", "--role", help="Role (admin, manager, inspector)."),
        department: str | None = typer.Option(None, "--department", help="Department."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    body = {"name": name, "email": email, "password": password, "role": role}
    if department:
        body["department"] = department

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        data = client.user_create(body)
    except QcClientError as e:
        fail(e, "Failed to create user")
    finally:
        client.close()

    console.ok(f"User created: {record_id(data)}")


@app.command("update")
def update_user(
        user_id: str = typer.Argument(..., help="User ID."),
        field: list[str] | None = typer.Option(None, "--field", help="Field as key=value (repeatable)."),
        photo: str | None = typer.Option(None, "--photo", help="Profile photo to upload."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    try:
        body = parse_fields(field)
    except ValueError as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    if not body and not photo:
        console.err("Nothing to update.")
        raise typer.Exit(code=2)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.user_update(user_id, body, photo=photo)
    except QcClientError as e:
        fail(e, f"Failed to update user {user_id}")
    except OSError as e:
        console.err(f"Failed to read photo: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    console.ok(f"User {user_id} updated.")


@app.command("delete")
def delete_user(
        user_id: str = typer.Argument(..., help="User ID."),
        yes: bool = typer.Option(False, "--yes", help="Skip confirmation prompt."),
        base_url: str | None = typer.Option(None, "--base-url", help="Override API root URL."),
):
    if not yes:
        if not typer.confirm(f"Delete user {user_id}?", default=False):
            console.info("Aborted.")
            raise typer.Exit(code=0)

    cfg = load_config()
    client = make_client(cfg, base_url_override=base_url)
    try:
        client.user_delete(user_id)
    except QcClientError as e:
        fail(e, f"Failed to delete user {user_id}")
    finally:
        client.close()

    console.ok(f"User {user_id} deleted.")
