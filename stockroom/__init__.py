"""Stockroom: serial-number inventory with an admin-approved stock-out workflow."""

__version__ = "0.1.0"
