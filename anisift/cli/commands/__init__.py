"""
CLI Commands - Command implementations for AniSift.

This package contains the episode commands (list, get) and the
sources and config command groups.
"""
