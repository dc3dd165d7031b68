"""
CLI Client Module.

Command-line client built with Typer for communicating with a
Sprout-Track server.

Architecture:
- CLI is a thin presentation layer over the server's REST API
- CLI calls the server via HTTP (httpx)
- output.py renders every result as json, table, or plain text
- sessions.py enforces one open sleep/pump session per baby

Usage:
    sprout-track --help
    sprout-track sleep start --type NAP
    sprout-track timeline -o plain
"""
