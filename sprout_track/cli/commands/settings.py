"""
Settings Commands.

Family settings live on the server. The unit defaults are mirrored into
the local settings file so quick-log commands can fill in units offline.
"""

from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError

from sprout_track.cli.console import handle_errors, info, success
from sprout_track.cli.context import CliContext, get_context
from sprout_track.cli.dates import format_date
from sprout_track.cli.options import OUTPUT
from sprout_track.cli.output import Field, render
from sprout_track.cli.schemas import ServerSettings
from sprout_track.core.config_schema import CachedSettings
from sprout_track.core.exceptions import ExternalServiceError, ValidationError

app = typer.Typer(help="View and update family settings")

SETTINGS_PATH = "/api/settings"

SETTINGS_FIELDS = [
    Field("id", "ID"),
    Field("familyName", "Family Name"),
    Field("authType", "Auth Type"),
    Field("defaultBottleUnit", "Bottle Unit"),
    Field("defaultSolidsUnit", "Solids Unit"),
    Field("defaultHeightUnit", "Height Unit"),
    Field("defaultWeightUnit", "Weight Unit"),
    Field("defaultTempUnit", "Temperature Unit"),
    Field("updatedAt", "Last Updated", format_date),
]

CACHED_FIELDS = [
    Field("default_bottle_unit", "Bottle Unit"),
    Field("default_solids_unit", "Solids Unit"),
    Field("default_height_unit", "Height Unit"),
    Field("default_weight_unit", "Weight Unit"),
    Field("default_temp_unit", "Temperature Unit"),
    Field("cached_at", "Cached At", format_date),
]


def _cache(cli: CliContext, data: object) -> ServerSettings:
    """Mirror the server's unit defaults into the local settings file."""
    try:
        settings = ServerSettings.model_validate(data)
    except PydanticValidationError as e:
        raise ExternalServiceError("Invalid settings response from server") from e

    cli.store.update(
        cached_settings=CachedSettings(
            default_bottle_unit=settings.default_bottle_unit,
            default_solids_unit=settings.default_solids_unit,
            default_height_unit=settings.default_height_unit,
            default_weight_unit=settings.default_weight_unit,
            default_temp_unit=settings.default_temp_unit,
            cached_at=cli.clock(),
        )
    )
    return settings


@app.command()
def get(
    ctx: typer.Context,
    output: Optional[str] = OUTPUT,
) -> None:
    """Show the family settings from the server."""
    cli = get_context(ctx)
    with handle_errors("get settings"):
        mode = cli.resolve_mode(output)
        cli.require_auth()
        data = cli.run(cli.client.get(SETTINGS_PATH))
    render(data, mode=mode, fields=SETTINGS_FIELDS)


@app.command("set")
def set_settings(
    ctx: typer.Context,
    family_name: Optional[str] = typer.Option(None, "--family-name", help="Family name"),
    bottle_unit: Optional[str] = typer.Option(None, "--bottle-unit", help="Default bottle unit (OZ, ML)"),
    solids_unit: Optional[str] = typer.Option(None, "--solids-unit", help="Default solids unit (TBSP, etc.)"),
    height_unit: Optional[str] = typer.Option(None, "--height-unit", help="Default height unit (IN, CM)"),
    weight_unit: Optional[str] = typer.Option(None, "--weight-unit", help="Default weight unit (LB, KG)"),
    temp_unit: Optional[str] = typer.Option(None, "--temp-unit", help="Default temperature unit (F, C)"),
    output: Optional[str] = OUTPUT,
) -> None:
    """
    Update family settings and refresh the local cache.

    Examples:
        sprout-track settings set --bottle-unit ML
    """
    cli = get_context(ctx)
    with handle_errors("update settings"):
        mode = cli.resolve_mode(output)
        changes = {
            "familyName": family_name,
            "defaultBottleUnit": bottle_unit.upper() if bottle_unit else None,
            "defaultSolidsUnit": solids_unit.upper() if solids_unit else None,
            "defaultHeightUnit": height_unit.upper() if height_unit else None,
            "defaultWeightUnit": weight_unit.upper() if weight_unit else None,
            "defaultTempUnit": temp_unit.upper() if temp_unit else None,
        }
        changes = {key: value for key, value in changes.items() if value}
        if not changes:
            raise ValidationError("No settings specified to update")

        cli.require_auth()
        data = cli.run(cli.client.put(SETTINGS_PATH, json=changes))
        _cache(cli, data)
    success("Settings updated")
    render(data, mode=mode, fields=SETTINGS_FIELDS)


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Fetch settings from the server and cache the unit defaults locally."""
    cli = get_context(ctx)
    with handle_errors("refresh settings"):
        cli.require_auth()
        data = cli.run(cli.client.get(SETTINGS_PATH))
        settings = _cache(cli, data)
    success("Settings refreshed and cached locally")
    info(f"Bottle unit: {settings.default_bottle_unit}")
    info(f"Solids unit: {settings.default_solids_unit}")
    info(f"Height unit: {settings.default_height_unit}")
    info(f"Weight unit: {settings.default_weight_unit}")
    info(f"Temperature unit: {settings.default_temp_unit}")


@app.command()
def cached(
    ctx: typer.Context,
    output: Optional[str] = OUTPUT,
) -> None:
    """Show the locally cached unit defaults."""
    cli = get_context(ctx)
    with handle_errors("show cached settings"):
        mode = cli.resolve_mode(output)
        cached_settings = cli.store.config.cached_settings
    if cached_settings is None:
        info("No cached settings. Run: sprout-track settings refresh")
        return
    render(cached_settings.model_dump(mode="json"), mode=mode, fields=CACHED_FIELDS)
