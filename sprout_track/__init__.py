"""
Sprout-Track CLI.

- core/: Configuration, logging, and the application error taxonomy
- cli/: Typer + Rich command-line client for the Sprout-Track REST API
"""

__version__ = "0.1.0"
