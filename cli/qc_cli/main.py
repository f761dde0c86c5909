from __future__ import annotations

import typer

from .auth_state import resolve_auth_context
from .commands import activities_cmd, ai_cmd, auth_cmd, defects_cmd, inspections_cmd, products_cmd, users_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="qc",
        help="Quality-control inspection CLI",
        no_args_is_help=True,
    )

    ctx = resolve_auth_context()

    app.add_typer(auth_cmd.app, name="auth")

    if ctx.state == "authed":
        app.command("whoami")(auth_cmd.whoami_impl)
        app.command("analytics")(activities_cmd.analytics_impl)
        app.add_typer(defects_cmd.app, name="defects")
        app.add_typer(inspections_cmd.app, name="inspections")
        app.add_typer(products_cmd.app, name="products")
        app.add_typer(users_cmd.app, name="users")
        app.add_typer(activities_cmd.app, name="activities")
        app.add_typer(ai_cmd.app, name="ai")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
