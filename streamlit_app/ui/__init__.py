"""
UI Components Module.

This module provides layout primitives, feedback helpers and status badges
for the Recipe Manager Streamlit app.
"""

from .layout import page_header, card
from .feedback import show_error, show_empty_state, show_notice, working_spinner

__all__ = [
    "page_header",
    "card",
    "show_error",
    "show_empty_state",
    "show_notice",
    "working_spinner",
]
