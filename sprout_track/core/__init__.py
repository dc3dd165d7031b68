"""
Core Infrastructure.

Environment settings, the local settings file, structured logging, and
the exception hierarchy shared by every command.
"""
