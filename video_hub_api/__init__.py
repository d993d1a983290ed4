"""
Top‑level package for the Video Hub API.

This file makes ``video_hub_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``video_hub_api.app.main``.  Tests and the helper scripts in the
repository root rely on these absolute imports.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
