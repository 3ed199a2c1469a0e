"""
Controller for the recipe management screen.

RecipeScreen ties the three collaborators together along the screen's data flow:

    user action -> validated form -> API call -> view state transition
                -> cache invalidation -> refetch -> derived values

It has no Streamlit imports and can be driven from tests with a fake
API. The `api` argument is anything exposing the functions of
streamlit_app.utils.api_client (list_recipes, create_recipe, ...), including that
module itself. API functions follow the api_client convention: they return None
(False for deletes) on failure and take care of notifying the user.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from kitchen.costing import estimate_recipe_cost
from kitchen.forms import (
    FieldError,
    recipe_item_payload,
    recipe_payload,
    validate_recipe_form,
    validate_recipe_item_form,
)
from kitchen.models import InventoryItem, Recipe, RecipeItemWithDetails
from kitchen.utils.cache import (
    RESOURCE_INVENTORY,
    RESOURCE_RECIPE_ITEMS,
    RESOURCE_RECIPES,
    CacheEntry,
    CacheKey,
    QueryCache,
    inventory_key,
    recipe_items_key,
    recipes_key,
)
from kitchen.view_state import AddingIngredient, AddingRecipe, EditingRecipe, RecipeViewState

logger = logging.getLogger(__name__)

# Names of the in-flight flags, one per action button
ACTION_CREATE_RECIPE = "create_recipe"
ACTION_UPDATE_RECIPE = "update_recipe"
ACTION_ADD_INGREDIENT = "add_ingredient"
ACTION_REMOVE_INGREDIENT = "remove_ingredient"


@dataclass
class SubmitOutcome:
    """Result of a form submission. attempted is False when no request was sent."""
    ok: bool
    errors: List[FieldError] = field(default_factory=list)
    attempted: bool = True


class RecipeScreen:
    """Reads, mutations and state transitions of the recipe screen."""

    def __init__(self, api: Any, cache: Optional[QueryCache] = None, state: Optional[RecipeViewState] = None):
        self.api = api
        self.cache = cache if cache is not None else QueryCache()
        self.state = state if state is not None else RecipeViewState()
        self._pending: Dict[str, Any] = {}

    # -- reads --------------------------------------------------------------

    def load_recipes(self) -> CacheEntry:
        """Fetch (or reuse) the recipe list and reconcile the selection with it."""
        was_fresh = not self.cache.needs_fetch(recipes_key())
        entry = self.cache.fetch(recipes_key(), self.api.list_recipes)
        if not was_fresh and not entry.is_error and entry.data is not None:
            self.state.reconcile(self.recipes())
        return entry

    def load_inventory(self) -> CacheEntry:
        return self.cache.fetch(inventory_key(), self.api.list_inventory)

    def load_selected_items(self) -> Optional[CacheEntry]:
        """
        Fetch the ingredient list of the selected recipe.

        Inactive (returns None) while nothing is selected. The request is keyed on
        the recipe id at call time.
        """
        recipe_id = self.state.selected_recipe_id
        if recipe_id is None:
            return None
        return self.cache.fetch(recipe_items_key(recipe_id), lambda: self.api.list_recipe_items(recipe_id))

    def recipes(self) -> List[Recipe]:
        return self.cache.data(recipes_key(), default=[]) or []

    def visible_recipes(self) -> List[Recipe]:
        return self.state.visible_recipes(self.recipes())

    def inventory(self) -> List[InventoryItem]:
        return self.cache.data(inventory_key(), default=[]) or []

    def selected_items(self) -> List[RecipeItemWithDetails]:
        """Ingredient list cached for the currently selected recipe only."""
        recipe_id = self.state.selected_recipe_id
        if recipe_id is None:
            return []
        return self.cache.data(recipe_items_key(recipe_id), default=[]) or []

    def selected_cost(self) -> float:
        return estimate_recipe_cost(self.selected_items())

    def retry(self, key: CacheKey) -> None:
        """Retry action for a failed read: the next load_* call fetches it again."""
        self.cache.invalidate(key)

    def reload(self) -> None:
        """Mark every cached read stale; selection and dialogs are kept."""
        for resource in (RESOURCE_RECIPES, RESOURCE_INVENTORY, RESOURCE_RECIPE_ITEMS):
            self.cache.invalidate_resource(resource)

    # -- mutations ----------------------------------------------------------
    #
    # Streamlit runs the page top to bottom, so a click cannot disable its own
    # button. A submit click therefore only calls request() and reruns. The rerun
    # renders the action's button disabled (is_pending) and finishes with
    # run_pending(), which performs the queued request and clears the flag.

    def is_pending(self, action: str) -> bool:
        """True while the action is queued or its request is in flight."""
        return action in self._pending

    def has_pending(self) -> bool:
        return bool(self._pending)

    def request(self, action: str, arg: Any = None) -> bool:
        """
        Queue a mutation for the next run_pending() call.

        Args:
            action: One of the ACTION_* names
            arg: Extra argument of the action (the item id for ACTION_REMOVE_INGREDIENT)

        Returns:
            False if the action is already queued or in flight.
        """
        if action in self._pending:
            logger.debug("Ignoring %s: request already in flight", action)
            return False
        self._pending[action] = arg
        return True

    def run_pending(self) -> List[Tuple[str, SubmitOutcome]]:
        """Perform every queued mutation; returns (action, outcome) pairs."""
        results = []
        for action in list(self._pending):
            if action == ACTION_REMOVE_INGREDIENT:
                outcome = SubmitOutcome(ok=self.remove_ingredient(self._pending[action]))
            else:
                outcome = {
                    ACTION_CREATE_RECIPE: self.submit_new_recipe,
                    ACTION_UPDATE_RECIPE: self.submit_recipe_edit,
                    ACTION_ADD_INGREDIENT: self.submit_ingredient,
                }[action]()
            results.append((action, outcome))
        return results

    def _run(self, action: str, call):
        self._pending[action] = self._pending.get(action)
        try:
            return call()
        finally:
            self._pending.pop(action, None)

    def submit_new_recipe(self) -> SubmitOutcome:
        """Validate the add-recipe form and create the recipe."""
        return self._run(ACTION_CREATE_RECIPE, self._create_recipe)

    def _create_recipe(self) -> SubmitOutcome:
        if not isinstance(self.state.mode, AddingRecipe):
            return SubmitOutcome(ok=False, attempted=False)
        form = self.state.recipe_form
        errors = validate_recipe_form(form)
        if errors:
            return SubmitOutcome(ok=False, errors=errors, attempted=False)

        created = self.api.create_recipe(recipe_payload(form))
        # On failure nothing was applied locally, so the dialog and input stay as they are
        if created is None:
            return SubmitOutcome(ok=False)
        self.state.on_recipe_created(created, self.cache)
        return SubmitOutcome(ok=True)

    def submit_recipe_edit(self) -> SubmitOutcome:
        """Validate the edit form and update the recipe being edited."""
        return self._run(ACTION_UPDATE_RECIPE, self._update_recipe)

    def _update_recipe(self) -> SubmitOutcome:
        if not isinstance(self.state.mode, EditingRecipe):
            return SubmitOutcome(ok=False, attempted=False)
        recipe_id = self.state.mode.recipe_id
        form = self.state.recipe_form
        errors = validate_recipe_form(form)
        if errors:
            return SubmitOutcome(ok=False, errors=errors, attempted=False)

        updated = self.api.update_recipe(recipe_id, recipe_payload(form))
        if updated is None:
            return SubmitOutcome(ok=False)
        self.state.on_recipe_updated(updated, self.cache)
        return SubmitOutcome(ok=True)

    def submit_ingredient(self) -> SubmitOutcome:
        """Validate the add-ingredient form and add the ingredient to its recipe."""
        return self._run(ACTION_ADD_INGREDIENT, self._add_ingredient)

    def _add_ingredient(self) -> SubmitOutcome:
        if not isinstance(self.state.mode, AddingIngredient):
            return SubmitOutcome(ok=False, attempted=False)
        recipe_id = self.state.mode.recipe_id
        form = self.state.ingredient_form
        errors = validate_recipe_item_form(form)
        if errors:
            return SubmitOutcome(ok=False, errors=errors, attempted=False)

        added = self.api.add_recipe_item(recipe_id, recipe_item_payload(form))
        if added is None:
            return SubmitOutcome(ok=False)
        self.state.on_ingredient_added(recipe_id, self.cache)
        return SubmitOutcome(ok=True)

    def remove_ingredient(self, item_id: int) -> bool:
        """Remove an ingredient line from the selected recipe."""
        return self._run(ACTION_REMOVE_INGREDIENT, lambda: self._remove_ingredient(item_id))

    def _remove_ingredient(self, item_id: int) -> bool:
        recipe_id = self.state.selected_recipe_id
        if recipe_id is None:
            return False
        if not self.api.remove_recipe_item(recipe_id, item_id):
            return False
        self.state.on_ingredient_removed(recipe_id, self.cache)
        return True
