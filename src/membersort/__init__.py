"""Membersort: keep type members ordered by accessibility."""

__version__ = "0.3.0"
