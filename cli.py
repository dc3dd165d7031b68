#!/usr/bin/env python3
"""
Sprout-Track CLI entry point.

Equivalent to the installed `sprout-track` console script.

Usage:
    python cli.py --help
    python cli.py config set-server https://tracker.example.com
    python cli.py --debug sleep list
"""

from sprout_track.cli.app import app

if __name__ == "__main__":
    app()
