"""
View state of the recipe management screen.

The screen has three pieces of transient state:
- the selected recipe (whose ingredients and cost estimate are shown),
- the UI mode, i.e. which dialog is open,
- the active filter tab over the recipe list.

Only one dialog can be open at a time, which is why the mode is a single tagged
value (Idle, AddingRecipe, EditingRecipe, AddingIngredient) instead of a set of
independent flags.

Transitions after API results are methods on RecipeViewState; they take the
QueryCache so they can invalidate exactly the reads a mutation affects. Failed
mutations change nothing, since nothing was applied locally in the first place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Union

from kitchen.forms import RecipeFormData, RecipeItemFormData
from kitchen.models import ORDER_TYPE_BOTH, ORDER_TYPE_DINE_IN, Recipe
from kitchen.utils.cache import QueryCache, recipe_items_key, recipes_key


class FilterTab(str, Enum):
    """Client-side filters over the fetched recipe list."""
    ALL = "all"
    DINE_IN = "dine_in"
    BOTH = "both"


FILTER_TAB_LABELS = {
    FilterTab.ALL: "All Recipes",
    FilterTab.DINE_IN: "Dine In",
    FilterTab.BOTH: "Versatile",
}


@dataclass(frozen=True)
class Idle:
    """No dialog open."""


@dataclass(frozen=True)
class AddingRecipe:
    """The add-recipe dialog is open."""


@dataclass(frozen=True)
class EditingRecipe:
    """The edit dialog is open for one recipe."""
    recipe: Recipe

    @property
    def recipe_id(self) -> int:
        return self.recipe.id


@dataclass(frozen=True)
class AddingIngredient:
    """The add-ingredient dialog is open for one recipe."""
    recipe_id: int


UiMode = Union[Idle, AddingRecipe, EditingRecipe, AddingIngredient]

IDLE = Idle()


def filter_recipes(recipes: Iterable[Recipe], tab: FilterTab) -> List[Recipe]:
    """Return the recipes visible under a filter tab."""
    if tab == FilterTab.DINE_IN:
        return [r for r in recipes if r.order_type == ORDER_TYPE_DINE_IN]
    if tab == FilterTab.BOTH:
        return [r for r in recipes if r.order_type == ORDER_TYPE_BOTH]
    return list(recipes)


@dataclass
class RecipeViewState:
    """Selection, open dialog and filter tab of the recipe screen."""
    selected_recipe: Optional[Recipe] = None
    mode: UiMode = IDLE
    active_tab: FilterTab = FilterTab.ALL
    recipe_form: RecipeFormData = field(default_factory=RecipeFormData)
    ingredient_form: RecipeItemFormData = field(default_factory=RecipeItemFormData)

    @property
    def selected_recipe_id(self) -> Optional[int]:
        return self.selected_recipe.id if self.selected_recipe is not None else None

    @property
    def editing_recipe(self) -> Optional[Recipe]:
        return self.mode.recipe if isinstance(self.mode, EditingRecipe) else None

    @property
    def dialog_recipe_id(self) -> Optional[int]:
        """Recipe the open dialog acts on, or None for Idle and AddingRecipe."""
        if isinstance(self.mode, (EditingRecipe, AddingIngredient)):
            return self.mode.recipe_id
        return None

    # -- user actions -------------------------------------------------------

    def select_recipe(self, recipe: Recipe) -> bool:
        """
        Select a recipe row.

        Returns True if the selection changed. Selecting the already selected
        recipe is a no-op; its cached ingredient list is reused. A dialog tied to
        another recipe (editing it, adding an ingredient to it) is closed.
        """
        if self.selected_recipe is not None and self.selected_recipe.id == recipe.id:
            return False
        self.selected_recipe = recipe
        if self.dialog_recipe_id is not None and self.dialog_recipe_id != recipe.id:
            self.close_dialog()
        return True

    def clear_selection(self) -> None:
        self.selected_recipe = None
        if isinstance(self.mode, (EditingRecipe, AddingIngredient)):
            self.close_dialog()

    def set_tab(self, tab: Union[FilterTab, str]) -> None:
        self.active_tab = FilterTab(tab)

    def visible_recipes(self, recipes: Iterable[Recipe]) -> List[Recipe]:
        return filter_recipes(recipes, self.active_tab)

    def open_add_recipe(self) -> None:
        """Open the add-recipe dialog with a fresh form."""
        self.mode = AddingRecipe()
        self.recipe_form = RecipeFormData()

    def open_edit_recipe(self, recipe: Recipe) -> None:
        """Open the edit dialog, seeding the form from the recipe's current values."""
        self.mode = EditingRecipe(recipe=recipe)
        self.recipe_form = RecipeFormData.from_recipe(recipe)

    def open_add_ingredient(self) -> bool:
        """
        Open the add-ingredient dialog for the selected recipe.

        Returns False (and stays put) when no recipe is selected.
        """
        if self.selected_recipe is None:
            return False
        self.mode = AddingIngredient(recipe_id=self.selected_recipe.id)
        self.ingredient_form = RecipeItemFormData()
        return True

    def close_dialog(self) -> None:
        self.mode = IDLE

    # -- API results --------------------------------------------------------

    def on_recipe_created(self, recipe: Recipe, cache: QueryCache) -> None:
        """Close the add dialog, select the new recipe and refetch the list."""
        if isinstance(self.mode, AddingRecipe):
            self.close_dialog()
        self.selected_recipe = recipe
        cache.invalidate(recipes_key())

    def on_recipe_updated(self, recipe: Recipe, cache: QueryCache) -> None:
        """Close the edit dialog, refresh the selection if it was edited, refetch the list."""
        if isinstance(self.mode, EditingRecipe) and self.mode.recipe_id == recipe.id:
            self.close_dialog()
        if self.selected_recipe is not None and self.selected_recipe.id == recipe.id:
            self.selected_recipe = recipe
        cache.invalidate(recipes_key())

    def on_ingredient_added(self, recipe_id: int, cache: QueryCache) -> None:
        """
        Close the add-ingredient dialog and refetch the recipe's ingredient list.

        Other recipes' cached ingredient lists are left alone.
        """
        if isinstance(self.mode, AddingIngredient) and self.mode.recipe_id == recipe_id:
            self.close_dialog()
        cache.invalidate(recipe_items_key(recipe_id))

    def on_ingredient_removed(self, recipe_id: int, cache: QueryCache) -> None:
        cache.invalidate(recipe_items_key(recipe_id))

    def reconcile(self, recipes: Iterable[Recipe]) -> None:
        """
        Sync the selection with a freshly fetched recipe list.

        A selected recipe that no longer exists (deleted elsewhere) is deselected,
        together with any dialog tied to it. A selected recipe that still exists is
        replaced with the fresh copy.
        """
        by_id = {r.id: r for r in recipes}
        if self.selected_recipe is not None:
            fresh = by_id.get(self.selected_recipe.id)
            if fresh is None:
                self.clear_selection()
            else:
                self.selected_recipe = fresh
        if isinstance(self.mode, EditingRecipe) and self.mode.recipe_id not in by_id:
            self.close_dialog()
