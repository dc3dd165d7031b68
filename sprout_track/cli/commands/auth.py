"""
Authentication Commands.

PIN login against /api/auth. The server does not report token lifetime,
so a successful login or refresh records an expiry 30 minutes ahead and
commands refuse to run past it.
"""

from datetime import timedelta
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError

from sprout_track.cli.console import handle_errors, info, success, warning
from sprout_track.cli.context import CliContext, get_context
from sprout_track.cli.options import OUTPUT
from sprout_track.cli.output import Field, render
from sprout_track.cli.schemas import AuthResponse
from sprout_track.cli.validation import optional_string, validate_pin
from sprout_track.core.exceptions import ExternalServiceError
from sprout_track.core.logging import get_logger

logger = get_logger(__name__)

app = typer.Typer(help="Authentication commands")

TOKEN_LIFETIME = timedelta(minutes=30)

STATUS_FIELDS = [
    Field("authenticated", "Authenticated"),
    Field("server", "Server"),
    Field("familySlug", "Family"),
    Field("tokenStatus", "Token Status"),
]


def _parse_auth(data: object) -> AuthResponse:
    try:
        return AuthResponse.model_validate(data)
    except PydanticValidationError as e:
        raise ExternalServiceError("Invalid authentication response from server") from e


def _store_token(cli: CliContext, token: str) -> None:
    cli.store.set_token(token, cli.clock() + TOKEN_LIFETIME)
    cli.reset_client()


@app.command()
def login(
    ctx: typer.Context,
    pin: Optional[str] = typer.Option(None, "--pin", "-p", help="Security PIN (prompted if omitted)"),
    login_id: Optional[str] = typer.Option(None, "--login-id", "-l", help="Login ID (for caretaker auth)"),
    family: Optional[str] = typer.Option(None, "--family", "-f", help="Family slug"),
) -> None:
    """
    Authenticate with the Sprout-Track server.

    Examples:
        sprout-track auth login
        sprout-track auth login --pin 111222 --family smith
    """
    cli = get_context(ctx)
    with handle_errors("login"):
        client = cli.client
        if pin is None:
            pin = typer.prompt("Security PIN", hide_input=True, err=True)
        payload = {
            "securityPin": validate_pin(pin),
            "loginId": optional_string(login_id),
            "familySlug": optional_string(family),
        }
        data = cli.run(client.post("/api/auth", json={k: v for k, v in payload.items() if v is not None}))
        result = _parse_auth(data)

        _store_token(cli, result.token)
        family_slug = result.family_slug or optional_string(family)
        if family_slug:
            cli.store.update(family_slug=family_slug)

    logger.info("Logged in", name=result.name, family_slug=family_slug)
    success(f"Authenticated as {result.name or 'user'}")
    if family_slug:
        info(f"Family: {family_slug}")


@app.command()
def logout(ctx: typer.Context) -> None:
    """Clear stored credentials."""
    cli = get_context(ctx)
    with handle_errors("logout"):
        logged_in = bool(cli.store.config.token)
        if logged_in:
            cli.store.update(token=None, token_expires=None, family_slug=None)
            cli.reset_client()
    if not logged_in:
        warning("Not logged in")
        return
    success("Logged out successfully")


@app.command()
def status(
    ctx: typer.Context,
    output: Optional[str] = OUTPUT,
) -> None:
    """Show authentication status."""
    cli = get_context(ctx)
    with handle_errors("show auth status"):
        mode = cli.resolve_mode(output)
        config = cli.store.config
        expired = cli.store.is_token_expired(cli.clock())
        if not config.token:
            token_status = "No token"
        elif expired:
            token_status = "Expired"
        else:
            token_status = "Valid"
        data = {
            "authenticated": bool(config.token) and not expired,
            "server": config.server or "Not configured",
            "familySlug": config.family_slug or "Not set",
            "tokenStatus": token_status,
        }
    render(data, mode=mode, fields=STATUS_FIELDS)


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Exchange the current token for a fresh one."""
    cli = get_context(ctx)
    with handle_errors("refresh token"):
        cli.require_auth()
        data = cli.run(cli.client.post("/api/auth/refresh"))
        result = _parse_auth(data)
        _store_token(cli, result.token)
    success("Token refreshed")
