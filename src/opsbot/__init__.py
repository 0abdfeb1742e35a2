"""
opsbot - event-driven repository operations bot.

Operations are declared in YAML, triggered by GitHub webhook event types,
and run their tasks in order against a fixed registry of task calls.
"""

__version__ = "0.1.0"
