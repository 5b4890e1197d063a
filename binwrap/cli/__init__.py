"""Diagnostics CLI for binwrap configuration files."""
