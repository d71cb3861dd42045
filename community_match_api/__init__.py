"""
Top‑level package for the Community Match API.

This file makes ``community_match_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``community_match_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
