"""
Recipe Manager - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up the page
configuration and the sidebar shared by all pages.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/`
folder. Files in `pages/` starting with numbered prefixes (e.g.
`01_🍝_Recipes.py`) appear as pages in the sidebar navigation.

Run locally with:
    uvicorn api.main:app --reload          # development recipes API
    streamlit run streamlit_app/app.py
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and kitchen
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging

import streamlit as st

from api.config import BackendConfig
from utils.state import get_recipe_screen
from ui.layout import page_header

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Manager",
    page_icon="🍝",
    layout="wide",
    initial_sidebar_state="expanded",
)

with st.sidebar:
    st.markdown("### 🍝 **Recipe Manager**")
    st.divider()
    st.caption(f"Recipes API: `{BackendConfig.get_backend_url()}`")
    if st.button("Reload data", use_container_width=True):
        get_recipe_screen().reload()
        st.rerun()

page_header(
    "Recipe Manager",
    subtitle="Recipes, ingredients and cost estimates for your restaurant menu.",
)

screen = get_recipe_screen()
if screen.state.selected_recipe is not None:
    st.caption(f"Currently selected: **{screen.state.selected_recipe.dish_name}**")

st.markdown(
    """
    - **Recipes** – create and edit dishes, attach inventory ingredients, and see the
      estimated cost and stock health of every ingredient.
    """
)

if st.button("Open Recipes", type="primary"):
    st.switch_page("pages/01_🍝_Recipes.py")
