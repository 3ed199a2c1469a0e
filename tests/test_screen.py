"""
Tests for the recipe screen's view state and controller.

RecipeScreen is driven with an in-memory FakeApi that mimics the api_client
conventions (None on failure, False for a failed delete), so the full
action -> API -> state transition -> invalidation -> refetch flow runs without
Streamlit or a backend.
"""

from kitchen.forms import RecipeFormData, RecipeItemFormData
from kitchen.models import InventoryItem, Recipe, RecipeItem, RecipeItemWithDetails
from kitchen.screen import ACTION_CREATE_RECIPE, ACTION_REMOVE_INGREDIENT, RecipeScreen
from kitchen.utils.cache import QueryCache, inventory_key, recipe_items_key, recipes_key
from kitchen.view_state import (
    AddingIngredient,
    AddingRecipe,
    EditingRecipe,
    FilterTab,
    Idle,
    RecipeViewState,
    filter_recipes,
)


def make_recipe(recipe_id: int, name: str = None, order_type: str = "dine_in") -> Recipe:
    return Recipe(id=recipe_id, dish_name=name or f"Dish {recipe_id}", order_type=order_type)


class FakeApi:
    """In-memory stand-in for streamlit_app.utils.api_client."""

    def __init__(self):
        self.recipes = {1: make_recipe(1, "Margherita", "both"), 3: make_recipe(3, "Carbonara"), 5: make_recipe(5, "Tiramisu", "takeaway")}
        self.inventory = [
            InventoryItem(id=7, item_name="Flour", unit_of_measurement="kg", unit_price="$1.20", ideal_qty=50, current_qty=40),
        ]
        self.items = {1: [], 3: [], 5: []}
        self.calls = []
        self.fail = set()
        self._next_item_id = 100

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        return name in self.fail

    def list_recipes(self):
        if self._record("list_recipes"):
            return None
        return sorted(self.recipes.values(), key=lambda r: r.id)

    def list_inventory(self):
        if self._record("list_inventory"):
            return None
        return list(self.inventory)

    def list_recipe_items(self, recipe_id):
        if self._record("list_recipe_items", recipe_id):
            return None
        return list(self.items[recipe_id])

    def create_recipe(self, payload):
        if self._record("create_recipe", payload):
            return None
        recipe = Recipe.model_validate({"id": max(self.recipes) + 1, **payload})
        self.recipes[recipe.id] = recipe
        self.items[recipe.id] = []
        return recipe

    def update_recipe(self, recipe_id, payload):
        if self._record("update_recipe", recipe_id, payload):
            return None
        recipe = Recipe.model_validate({"id": recipe_id, **payload})
        self.recipes[recipe_id] = recipe
        return recipe

    def add_recipe_item(self, recipe_id, payload):
        if self._record("add_recipe_item", recipe_id, payload):
            return None
        self._next_item_id += 1
        item = RecipeItem.model_validate({"id": self._next_item_id, "recipeId": recipe_id, **payload})
        self.items[recipe_id].append(
            RecipeItemWithDetails(inventory_item=self.inventory[0], **item.model_dump())
        )
        return item

    def remove_recipe_item(self, recipe_id, item_id):
        if self._record("remove_recipe_item", recipe_id, item_id):
            return False
        self.items[recipe_id] = [i for i in self.items[recipe_id] if i.id != item_id]
        return True

    def count(self, name, *args):
        return sum(1 for call in self.calls if call[0] == name and call[1:1 + len(args)] == args)


def loaded_screen(api=None):
    screen = RecipeScreen(api or FakeApi())
    screen.load_recipes()
    screen.load_inventory()
    return screen


class TestFilterTabs:
    """Test cases for the client-side recipe filters."""

    def test_filters(self):
        recipes = [make_recipe(1, order_type="dine_in"), make_recipe(2, order_type="takeaway"), make_recipe(3, order_type="both")]
        assert [r.id for r in filter_recipes(recipes, FilterTab.ALL)] == [1, 2, 3]
        assert [r.id for r in filter_recipes(recipes, FilterTab.DINE_IN)] == [1]
        assert [r.id for r in filter_recipes(recipes, FilterTab.BOTH)] == [3]

    def test_takeaway_only_visible_under_all(self):
        screen = loaded_screen()
        screen.state.set_tab("dine_in")
        assert [r.id for r in screen.visible_recipes()] == [3]
        screen.state.set_tab(FilterTab.BOTH)
        assert [r.id for r in screen.visible_recipes()] == [1]
        screen.state.set_tab(FilterTab.ALL)
        assert [r.id for r in screen.visible_recipes()] == [1, 3, 5]

    def test_tab_does_not_touch_selection(self):
        screen = loaded_screen()
        screen.state.select_recipe(screen.recipes()[2])
        screen.state.set_tab(FilterTab.DINE_IN)
        assert screen.state.selected_recipe_id == 5


class TestSelection:
    """Test cases for selecting recipes and loading their ingredients."""

    def test_nothing_selected_loads_nothing(self):
        api = FakeApi()
        screen = loaded_screen(api)
        assert screen.load_selected_items() is None
        assert screen.selected_items() == []
        assert api.count("list_recipe_items") == 0

    def test_select_loads_items_once(self):
        api = FakeApi()
        screen = loaded_screen(api)
        assert screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()
        assert not screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()
        assert api.count("list_recipe_items", 3) == 1

    def test_switching_back_reuses_cache(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[1])
        screen.load_selected_items()
        screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()
        screen.state.select_recipe(api.recipes[1])
        screen.load_selected_items()
        assert api.count("list_recipe_items", 1) == 1

    def test_late_response_for_previous_selection_is_not_shown(self):
        """Select A, then B before A's items arrive: the screen shows B's items only."""
        api = FakeApi()
        screen = loaded_screen(api)
        cache = screen.cache

        screen.state.select_recipe(api.recipes[1])
        pending_a = cache.begin(recipe_items_key(1))
        screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()
        cache.resolve(recipe_items_key(1), ["items of A"], pending_a)

        assert screen.state.selected_recipe_id == 3
        assert screen.selected_items() == []

    def test_clear_selection_closes_tied_dialog(self):
        screen = loaded_screen()
        screen.state.select_recipe(screen.recipes()[0])
        assert screen.state.open_add_ingredient()
        screen.state.clear_selection()
        assert screen.state.mode == Idle()


class TestRecipeMutations:
    """Test cases for creating and updating recipes."""

    def test_invalid_form_makes_no_request(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="A")
        outcome = screen.submit_new_recipe()
        assert not outcome.ok
        assert [e.field for e in outcome.errors] == ["dish_name"]
        assert api.count("create_recipe") == 0
        assert isinstance(screen.state.mode, AddingRecipe)

    def test_create_selects_new_recipe_and_closes_dialog(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli", order_type="both")
        outcome = screen.submit_new_recipe()

        assert outcome.ok
        assert screen.state.mode == Idle()
        assert screen.state.selected_recipe.dish_name == "Ravioli"
        assert not screen.is_pending(ACTION_CREATE_RECIPE)

        screen.load_recipes()
        assert api.count("list_recipes") == 2
        assert "Ravioli" in [r.dish_name for r in screen.recipes()]

    def test_failed_create_keeps_dialog_and_input(self):
        api = FakeApi()
        api.fail.add("create_recipe")
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli")
        outcome = screen.submit_new_recipe()

        assert not outcome.ok
        assert outcome.errors == []
        assert isinstance(screen.state.mode, AddingRecipe)
        assert screen.state.recipe_form.dish_name == "Ravioli"
        assert screen.state.selected_recipe_id == 3
        assert not screen.cache.needs_fetch(recipes_key())

    def test_edit_seeds_form_and_refreshes_selection(self):
        api = FakeApi()
        screen = loaded_screen(api)
        carbonara = api.recipes[3]
        screen.state.select_recipe(carbonara)
        screen.state.open_edit_recipe(carbonara)
        assert screen.state.recipe_form.dish_name == "Carbonara"
        assert screen.state.recipe_form.description == ""

        screen.state.recipe_form.dish_name = "Carbonara Romana"
        outcome = screen.submit_recipe_edit()

        assert outcome.ok
        assert screen.state.mode == Idle()
        assert screen.state.selected_recipe.dish_name == "Carbonara Romana"
        assert api.calls[-1][0] == "update_recipe"
        assert api.calls[-1][1] == 3
        assert screen.cache.needs_fetch(recipes_key())

    def test_edit_without_dialog_is_rejected(self):
        api = FakeApi()
        screen = loaded_screen(api)
        assert not screen.submit_recipe_edit().ok
        assert api.count("update_recipe") == 0

    def test_failed_update_keeps_dialog(self):
        api = FakeApi()
        api.fail.add("update_recipe")
        screen = loaded_screen(api)
        screen.state.open_edit_recipe(api.recipes[5])
        assert not screen.submit_recipe_edit().ok
        assert isinstance(screen.state.mode, EditingRecipe)


class TestIngredientMutations:
    """Test cases for adding and removing ingredients."""

    def test_add_ingredient_requires_selection(self):
        screen = loaded_screen()
        assert not screen.state.open_add_ingredient()
        assert screen.state.mode == Idle()

    def test_adding_to_one_recipe_refetches_only_that_recipe(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[5])
        screen.load_selected_items()
        screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()

        assert screen.state.open_add_ingredient()
        assert screen.state.mode == AddingIngredient(recipe_id=3)
        screen.state.ingredient_form = RecipeItemFormData(inventory_id="7", quantity_required="0.5", unit="kg")
        outcome = screen.submit_ingredient()

        assert outcome.ok
        assert screen.state.mode == Idle()
        assert screen.cache.needs_fetch(recipe_items_key(3))
        assert not screen.cache.needs_fetch(recipe_items_key(5))

        screen.load_selected_items()
        assert api.count("list_recipe_items", 3) == 2
        assert api.count("list_recipe_items", 5) == 1
        assert [i.quantity_required for i in screen.selected_items()] == ["0.5"]

    def test_invalid_ingredient_form(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_add_ingredient()
        outcome = screen.submit_ingredient()
        assert not outcome.ok
        assert {e.field for e in outcome.errors} == {"inventory_id", "quantity_required", "unit"}
        assert api.count("add_recipe_item") == 0

    def test_remove_ingredient(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_add_ingredient()
        screen.state.ingredient_form = RecipeItemFormData(inventory_id=7, quantity_required="2", unit="kg")
        screen.submit_ingredient()
        screen.load_selected_items()
        item_id = screen.selected_items()[0].id

        assert screen.remove_ingredient(item_id)
        screen.load_selected_items()
        assert screen.selected_items() == []

    def test_failed_remove_changes_nothing(self):
        api = FakeApi()
        api.fail.add("remove_recipe_item")
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()
        assert not screen.remove_ingredient(42)
        assert not screen.cache.needs_fetch(recipe_items_key(3))

    def test_selected_cost(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[1])
        screen.state.open_add_ingredient()
        screen.state.ingredient_form = RecipeItemFormData(inventory_id=7, quantity_required="2", unit="kg")
        screen.submit_ingredient()
        screen.load_selected_items()
        assert screen.selected_cost() == 2.4


class TestReadsAndReconcile:
    """Test cases for failed reads, retry and reconciling the selection."""

    def test_failed_read_then_retry(self):
        api = FakeApi()
        api.fail.add("list_recipes")
        screen = RecipeScreen(api)
        entry = screen.load_recipes()
        assert entry.is_error
        assert screen.recipes() == []
        assert api.count("list_recipes") == 2

        api.fail.discard("list_recipes")
        screen.retry(recipes_key())
        entry = screen.load_recipes()
        assert not entry.is_error
        assert len(screen.recipes()) == 3

    def test_deleted_selection_is_cleared_on_refetch(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[5])
        screen.state.open_edit_recipe(api.recipes[5])

        del api.recipes[5]
        screen.cache.invalidate(recipes_key())
        screen.load_recipes()

        assert screen.state.selected_recipe is None
        assert screen.state.mode == Idle()

    def test_reconcile_replaces_selection_with_fresh_copy(self):
        state = RecipeViewState()
        state.select_recipe(make_recipe(3, "Old name"))
        state.reconcile([make_recipe(3, "New name")])
        assert state.selected_recipe.dish_name == "New name"

    def test_shared_cache_across_screens(self):
        """A rerun rebuilds nothing: the same cache answers without new requests."""
        api = FakeApi()
        cache = QueryCache()
        RecipeScreen(api, cache=cache).load_recipes()
        RecipeScreen(api, cache=cache).load_recipes()
        assert api.count("list_recipes") == 1


class TestDialogFollowsSelection:
    """Test cases for dialogs tied to a recipe when the selection moves."""

    def test_switching_recipe_closes_add_ingredient_dialog(self):
        """An ingredient form opened for recipe 3 cannot post to 3 once 5 is on screen."""
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_add_ingredient()
        screen.state.select_recipe(api.recipes[5])

        assert screen.state.mode == Idle()
        screen.state.ingredient_form = RecipeItemFormData(inventory_id=7, quantity_required="1", unit="kg")
        outcome = screen.submit_ingredient()
        assert not outcome.ok
        assert not outcome.attempted
        assert api.count("add_recipe_item") == 0

    def test_reopened_dialog_targets_new_selection(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_add_ingredient()
        screen.state.select_recipe(api.recipes[5])
        screen.state.open_add_ingredient()
        assert screen.state.dialog_recipe_id == 5

        screen.state.ingredient_form = RecipeItemFormData(inventory_id=7, quantity_required="1", unit="kg")
        assert screen.submit_ingredient().ok
        assert api.calls[-1][:2] == ("add_recipe_item", 5)
        assert screen.cache.needs_fetch(recipe_items_key(5))

    def test_switching_recipe_closes_edit_dialog(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_edit_recipe(api.recipes[3])
        screen.state.select_recipe(api.recipes[1])
        assert screen.state.mode == Idle()

    def test_add_recipe_dialog_survives_selection(self):
        screen = loaded_screen()
        screen.state.open_add_recipe()
        screen.state.select_recipe(screen.recipes()[0])
        assert isinstance(screen.state.mode, AddingRecipe)

    def test_editing_other_recipe_keeps_selection(self):
        """Updating a recipe that is not selected leaves the selection object untouched."""
        api = FakeApi()
        screen = loaded_screen(api)
        carbonara = api.recipes[3]
        screen.state.select_recipe(carbonara)
        screen.state.mode = EditingRecipe(recipe=api.recipes[5])
        screen.state.recipe_form = RecipeFormData.from_recipe(api.recipes[5])
        screen.state.recipe_form.dish_name = "Tiramisu Classico"

        assert screen.submit_recipe_edit().ok
        assert screen.state.selected_recipe is carbonara
        assert screen.state.mode == Idle()
        assert screen.cache.needs_fetch(recipes_key())


class TestQueuedMutations:
    """Test cases for request()/run_pending(), which keep a button disabled during its request."""

    def test_requested_action_is_pending_until_run(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli")

        assert screen.request(ACTION_CREATE_RECIPE)
        assert screen.is_pending(ACTION_CREATE_RECIPE)
        assert api.count("create_recipe") == 0

        results = screen.run_pending()
        assert [(action, outcome.ok) for action, outcome in results] == [(ACTION_CREATE_RECIPE, True)]
        assert not screen.is_pending(ACTION_CREATE_RECIPE)
        assert not screen.has_pending()
        assert api.count("create_recipe") == 1

    def test_duplicate_request_is_rejected(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli")
        assert screen.request(ACTION_CREATE_RECIPE)
        assert not screen.request(ACTION_CREATE_RECIPE)
        screen.run_pending()
        assert api.count("create_recipe") == 1

    def test_pending_during_request(self):
        api = FakeApi()
        screen = loaded_screen(api)
        seen = []
        original = api.create_recipe

        def create_recipe(payload):
            seen.append(screen.is_pending(ACTION_CREATE_RECIPE))
            return original(payload)

        api.create_recipe = create_recipe
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli")
        screen.request(ACTION_CREATE_RECIPE)
        screen.run_pending()
        assert seen == [True]

    def test_failure_clears_pending(self):
        api = FakeApi()
        api.fail.add("create_recipe")
        screen = loaded_screen(api)
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli")
        screen.request(ACTION_CREATE_RECIPE)
        (action, outcome), = screen.run_pending()
        assert not outcome.ok
        assert outcome.attempted
        assert not screen.is_pending(ACTION_CREATE_RECIPE)
        assert isinstance(screen.state.mode, AddingRecipe)

    def test_cancelled_dialog_sends_nothing(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.open_add_recipe()
        screen.state.recipe_form = RecipeFormData(dish_name="Ravioli")
        screen.request(ACTION_CREATE_RECIPE)
        screen.state.close_dialog()
        (action, outcome), = screen.run_pending()
        assert not outcome.attempted
        assert api.count("create_recipe") == 0

    def test_queued_removal_uses_item_id(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.state.open_add_ingredient()
        screen.state.ingredient_form = RecipeItemFormData(inventory_id=7, quantity_required="2", unit="kg")
        screen.submit_ingredient()
        screen.load_selected_items()
        item_id = screen.selected_items()[0].id

        assert screen.request(ACTION_REMOVE_INGREDIENT, item_id)
        (action, outcome), = screen.run_pending()
        assert action == ACTION_REMOVE_INGREDIENT
        assert outcome.ok
        assert api.calls[-1] == ("remove_recipe_item", 3, item_id)


class TestReload:
    def test_reload_marks_every_read_stale_and_keeps_selection(self):
        api = FakeApi()
        screen = loaded_screen(api)
        screen.state.select_recipe(api.recipes[3])
        screen.load_selected_items()

        screen.reload()
        assert screen.cache.needs_fetch(recipes_key())
        assert screen.cache.needs_fetch(inventory_key())
        assert screen.cache.needs_fetch(recipe_items_key(3))
        assert screen.state.selected_recipe_id == 3

        screen.load_recipes()
        screen.load_inventory()
        screen.load_selected_items()
        assert api.count("list_recipes") == 2
        assert api.count("list_inventory") == 2
        assert api.count("list_recipe_items", 3) == 2
