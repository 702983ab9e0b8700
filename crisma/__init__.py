"""Crisma App: admin console for confirmation-class participants, catechists and groups."""

__version__ = "0.3.0"
