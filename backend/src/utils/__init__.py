"""
Utility modules for the well guide application.

Currently holds the UTC, offset and month arithmetic helpers.
"""
