"""
dateprune - generational retention for timestamp-named snapshot directories

Keeps one snapshot per hour, day, week, month and year inside windows measured
back from the most recent snapshot, and deletes the rest.
"""

try:
    from importlib.metadata import version

    __version__ = version("dateprune")
except Exception:
    __version__ = "0.0.0"  # Fallback for development
