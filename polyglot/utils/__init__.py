"""Shared utilities for the translation backend."""

from polyglot.utils.auth import admin_required, generate_token
from polyglot.utils.db import upsert

__all__ = [
    'admin_required',
    'generate_token',
    'upsert',
]
