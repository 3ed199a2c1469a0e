"""
Recipe Screen State Module.

This module wraps Streamlit's session_state to keep one RecipeScreen (view state
plus query cache) per browser session. Everything in it is transient: refreshing
the page or opening a new tab starts from an empty selection and an empty cache.

# NOTE: Streamlit reruns the page script on every interaction. The screen object
    survives reruns because it lives in session_state, so cached reads are only
    refetched when invalidated or expired.
"""

from types import ModuleType
from typing import Dict, Optional

import streamlit as st

from api.config import CacheConfig
from kitchen.screen import RecipeScreen
from kitchen.utils.cache import QueryCache

# Session state key for the recipe screen
RECIPE_SCREEN_KEY = "recipe_screen"

# Session state key for the pending notification shown after the next rerun
NOTICE_KEY = "recipe_screen_notice"

# Session state key for field errors of the open dialog's form
FORM_ERRORS_KEY = "recipe_screen_form_errors"


def get_recipe_screen(api: Optional[ModuleType] = None) -> RecipeScreen:
    """
    Get (or create) the RecipeScreen for this session.

    Args:
        api: API client module; defaults to streamlit_app.utils.api_client

    Returns:
        The session's RecipeScreen.
    """
    if RECIPE_SCREEN_KEY not in st.session_state:
        if api is None:
            from streamlit_app.utils import api_client as api
        st.session_state[RECIPE_SCREEN_KEY] = RecipeScreen(
            api=api,
            cache=QueryCache(ttl_seconds=CacheConfig.get_ttl_seconds()),
        )
    return st.session_state[RECIPE_SCREEN_KEY]


def push_notice(title: str, description: str, icon: str = "✅") -> None:
    """Queue a notification to show after st.rerun()."""
    st.session_state[NOTICE_KEY] = (title, description, icon)


def pop_notice() -> Optional[tuple]:
    """Take the queued notification, if any."""
    return st.session_state.pop(NOTICE_KEY, None)


def set_form_errors(errors: Dict[str, str]) -> None:
    """Remember field errors so they render next to their inputs after rerun."""
    st.session_state[FORM_ERRORS_KEY] = dict(errors)


def get_form_errors() -> Dict[str, str]:
    return st.session_state.get(FORM_ERRORS_KEY, {})


def clear_form_errors() -> None:
    st.session_state.pop(FORM_ERRORS_KEY, None)
