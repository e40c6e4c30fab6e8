"""Operational scripts and the ``timelog`` command line."""
