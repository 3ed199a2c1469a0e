"""
Standardized feedback utilities for consistent error, empty, and loading states.

Provides reusable components for displaying errors, empty states, notifications
and loading indicators across pages in a consistent manner.
"""

from contextlib import contextmanager
from typing import Optional

import streamlit as st


def show_error(message: str, hint: Optional[str] = None, retry_key: Optional[str] = None) -> bool:
    """
    Display a standardized error message with optional hint and Retry button.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
        retry_key: Widget key for a Retry button; no button when None

    Returns:
        True if the Retry button was clicked.
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")
    if retry_key:
        return st.button("Retry", key=retry_key, type="primary")
    return False


def show_empty_state(
    title: str,
    subtitle: Optional[str] = None,
    action_label: Optional[str] = None,
    action_key: Optional[str] = None,
) -> bool:
    """
    Display a standardized empty state with optional action button.

    Returns:
        True if the action button was clicked.
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)
    if action_label:
        return st.button(action_label, key=action_key, use_container_width=True, type="primary")
    return False


def show_notice(title: str, description: str, icon: str = "✅") -> None:
    """Show a transient notification (success by default)."""
    st.toast(f"**{title}** {description}", icon=icon)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Loading recipes…"):
            ...
    """
    with st.spinner(label):
        yield
