"""
Layout primitives for consistent page structure.

Provides reusable components for page headers and bordered cards.
"""

from contextlib import contextmanager
from typing import Callable, Optional

import streamlit as st


def page_header(title: str, subtitle: Optional[str] = None, right: Optional[Callable[[], None]] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
        right: Optional callable that renders right-side content (e.g., buttons)
    """
    if right is not None:
        col_title, col_right = st.columns([3, 1])
        with col_title:
            st.markdown(f"# {title}")
            if subtitle:
                st.caption(subtitle)
        with col_right:
            right()
    else:
        st.markdown(f"# {title}")
        if subtitle:
            st.caption(subtitle)


@contextmanager
def card(title: Optional[str] = None, caption: Optional[str] = None):
    """
    Context manager for a bordered card container.

    Usage:
        with card("Card Title"):
            st.write("Card content")
    """
    with st.container(border=True):
        if title:
            st.markdown(f"### {title}")
        if caption:
            st.caption(caption)
        yield
