"""
Recipes API Client Module.

This module is the **single source of truth** for all recipes API communication.
All HTTP calls made by the Streamlit frontend go through functions in this module.

Key principles:
- Centralized error handling for network issues
- Responses are parsed into kitchen.models objects before they leave this module
- Never let exceptions bubble up to crash the Streamlit app

Conventions:
    - Reads return parsed models, or None on any failure. The caller (the query
      cache) turns None into an error state with a Retry button.
    - Writes return the parsed response, or None on failure after showing a toast
      with the error. Deletes return True/False.
    - A non-2xx status is a failure (raise_for_status), and so is a 2xx response
      whose body is not the JSON we expect.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

from api.config import BackendConfig
from kitchen.models import InventoryItem, Recipe, RecipeItem, RecipeItemWithDetails

logger = logging.getLogger(__name__)


def get_backend_url() -> str:
    """
    Get the recipes API base URL (BACKEND_URL, default http://localhost:8000).

    Trailing slashes are removed.
    """
    return BackendConfig.get_backend_url()


def _notify_failure(title: str, detail: Any) -> None:
    """Show a transient failure notification; dialogs and forms stay as they are."""
    st.toast(f"{title}: {detail}", icon="⚠️")


def _describe(exc: Exception) -> str:
    if isinstance(exc, requests.exceptions.HTTPError) and exc.response is not None:
        return f"{exc.response.status_code} - {exc.response.text}"
    if isinstance(exc, requests.exceptions.Timeout):
        return "Request timed out. The recipes API may be slow or unreachable."
    if isinstance(exc, requests.exceptions.ConnectionError):
        return "Could not connect to the recipes API."
    return str(exc)


def list_recipes() -> Optional[List[Recipe]]:
    """
    Fetch all recipes (GET /api/recipes).

    Returns:
        List of Recipe, or None on error.
    """
    try:
        response = requests.get(
            f"{get_backend_url()}/api/recipes",
            timeout=BackendConfig.get_request_timeout(),
        )
        response.raise_for_status()
        return [Recipe.model_validate(r) for r in response.json()]
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.warning("GET /api/recipes failed: %s", _describe(e))
        return None


def list_inventory() -> Optional[List[InventoryItem]]:
    """
    Fetch the inventory catalog (GET /api/inventory).

    Returns:
        List of InventoryItem, or None on error.
    """
    try:
        response = requests.get(
            f"{get_backend_url()}/api/inventory",
            timeout=BackendConfig.get_request_timeout(),
        )
        response.raise_for_status()
        return [InventoryItem.model_validate(i) for i in response.json()]
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.warning("GET /api/inventory failed: %s", _describe(e))
        return None


def list_recipe_items(recipe_id: int) -> Optional[List[RecipeItemWithDetails]]:
    """
    Fetch one recipe's ingredients joined with inventory details
    (GET /api/recipes/{id}/items).

    Args:
        recipe_id: Recipe identifier

    Returns:
        List of RecipeItemWithDetails, or None on error.
    """
    try:
        response = requests.get(
            f"{get_backend_url()}/api/recipes/{recipe_id}/items",
            timeout=BackendConfig.get_request_timeout(),
        )
        response.raise_for_status()
        return [RecipeItemWithDetails.model_validate(i) for i in response.json()]
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.warning("GET /api/recipes/%s/items failed: %s", recipe_id, _describe(e))
        return None


def create_recipe(payload: Dict[str, Any]) -> Optional[Recipe]:
    """
    Create a recipe (POST /api/recipes).

    Args:
        payload: camelCase recipe form fields (see kitchen.forms.recipe_payload)

    Returns:
        The created Recipe, or None on error.
    """
    try:
        response = requests.post(
            f"{get_backend_url()}/api/recipes",
            json=payload,
            timeout=BackendConfig.get_mutation_timeout(),
        )
        response.raise_for_status()
        created = Recipe.model_validate(response.json())
        logger.debug("Created recipe %s", created.id)
        return created
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.warning("POST /api/recipes failed: %s", _describe(e))
        _notify_failure("Failed to create recipe", _describe(e))
        return None


def update_recipe(recipe_id: int, payload: Dict[str, Any]) -> Optional[Recipe]:
    """
    Update a recipe (PATCH /api/recipes/{id}).

    Args:
        recipe_id: Recipe identifier
        payload: camelCase recipe fields to change

    Returns:
        The updated Recipe, or None on error.
    """
    try:
        response = requests.patch(
            f"{get_backend_url()}/api/recipes/{recipe_id}",
            json=payload,
            timeout=BackendConfig.get_mutation_timeout(),
        )
        response.raise_for_status()
        updated = Recipe.model_validate(response.json())
        logger.debug("Updated recipe %s", updated.id)
        return updated
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.warning("PATCH /api/recipes/%s failed: %s", recipe_id, _describe(e))
        _notify_failure("Failed to update recipe", _describe(e))
        return None


def add_recipe_item(recipe_id: int, payload: Dict[str, Any]) -> Optional[RecipeItem]:
    """
    Add an ingredient to a recipe (POST /api/recipes/{id}/items).

    Args:
        recipe_id: Recipe identifier
        payload: {"inventoryId", "quantityRequired", "unit"}

    Returns:
        The created RecipeItem, or None on error.
    """
    try:
        response = requests.post(
            f"{get_backend_url()}/api/recipes/{recipe_id}/items",
            json=payload,
            timeout=BackendConfig.get_mutation_timeout(),
        )
        response.raise_for_status()
        return RecipeItem.model_validate(response.json())
    except (requests.exceptions.RequestException, ValueError, TypeError) as e:
        logger.warning("POST /api/recipes/%s/items failed: %s", recipe_id, _describe(e))
        _notify_failure("Failed to add ingredient", _describe(e))
        return None


def remove_recipe_item(recipe_id: int, item_id: int) -> bool:
    """
    Remove an ingredient from a recipe (DELETE /api/recipes/{id}/items/{itemId}).

    The response body is not inspected; any 2xx status counts as success.

    Returns:
        True if successful, False otherwise.
    """
    try:
        response = requests.delete(
            f"{get_backend_url()}/api/recipes/{recipe_id}/items/{item_id}",
            timeout=BackendConfig.get_mutation_timeout(),
        )
        response.raise_for_status()
        return True
    except requests.exceptions.RequestException as e:
        logger.warning("DELETE /api/recipes/%s/items/%s failed: %s", recipe_id, item_id, _describe(e))
        st.toast("Failed to remove ingredient.", icon="⚠️")
        return False
