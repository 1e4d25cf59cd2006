"""LanMap - interactive icicle map of LAN devices grouped by IP octet."""

__version__ = "0.1.0"
