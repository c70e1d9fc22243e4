"""Ghostty window tracker.

Tracks Ghostty terminal windows, attributes them to projects, classifies the
state of the Claude Code agent inside each one, and serves the result over a
loopback JSON API.
"""

__version__ = "1.0.0"
