"""
CLI Commands.

Organized by resource, one Typer group per module.
"""

from sprout_track.cli.commands.auth import app as auth_app
from sprout_track.cli.commands.baby import app as baby_app
from sprout_track.cli.commands.bath import app as bath_app
from sprout_track.cli.commands.config import app as config_app
from sprout_track.cli.commands.diaper import app as diaper_app
from sprout_track.cli.commands.feed import app as feed_app
from sprout_track.cli.commands.measurement import app as measurement_app
from sprout_track.cli.commands.medicine_log import app as medicine_log_app
from sprout_track.cli.commands.milestone import app as milestone_app
from sprout_track.cli.commands.note import app as note_app
from sprout_track.cli.commands.pump import app as pump_app
from sprout_track.cli.commands.settings import app as settings_app
from sprout_track.cli.commands.sleep import app as sleep_app
from sprout_track.cli.commands.timeline import timeline

__all__ = [
    "auth_app",
    "baby_app",
    "bath_app",
    "config_app",
    "diaper_app",
    "feed_app",
    "measurement_app",
    "medicine_log_app",
    "milestone_app",
    "note_app",
    "pump_app",
    "settings_app",
    "sleep_app",
    "timeline",
]
