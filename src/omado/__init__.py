"""
omado: a small personal task tracker.

The task list lives in a plain-text file; the console front end colors it
with the palette of the user's terminal theme and follows theme edits live.
"""

__version__ = "0.1.0"
