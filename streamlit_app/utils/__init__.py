"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Recipes API communication
- state: Session state management helpers
"""
