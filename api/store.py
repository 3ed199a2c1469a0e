"""
In-memory store backing the development recipes API.

This is a process-local, non-persistent implementation so the Streamlit screen can
run and be tested without the real recipes service. Everything is lost when the
process exits.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from api.schemas import RecipeCreate, RecipeItemCreate, RecipeUpdate
from kitchen.models import InventoryItem, Recipe, RecipeItem, RecipeItemWithDetails

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """Raised when a recipe, recipe item or inventory item does not exist."""


class RecipeStore:
    """Recipes, inventory and recipe items held in dictionaries keyed by id."""

    def __init__(self):
        self.recipes: Dict[int, Recipe] = {}
        self.inventory: Dict[int, InventoryItem] = {}
        self.recipe_items: Dict[int, RecipeItem] = {}
        self._next_id = {"recipe": 1, "inventory": 1, "recipe_item": 1}

    def _allocate(self, kind: str) -> int:
        new_id = self._next_id[kind]
        self._next_id[kind] = new_id + 1
        return new_id

    # -- recipes ------------------------------------------------------------

    def list_recipes(self) -> List[Recipe]:
        return sorted(self.recipes.values(), key=lambda r: r.id)

    def get_recipe(self, recipe_id: int) -> Recipe:
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        return recipe

    def create_recipe(self, data: RecipeCreate) -> Recipe:
        now = datetime.now(timezone.utc)
        recipe = Recipe(
            id=self._allocate("recipe"),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self.recipes[recipe.id] = recipe
        return recipe

    def update_recipe(self, recipe_id: int, data: RecipeUpdate) -> Recipe:
        recipe = self.get_recipe(recipe_id)
        changes = data.model_dump(exclude_unset=True)
        # Required fields cannot be nulled out
        for required in ("dish_name", "order_type", "is_active"):
            if required in changes and changes[required] is None:
                del changes[required]
        changes["updated_at"] = datetime.now(timezone.utc)
        updated = recipe.model_copy(update=changes)
        self.recipes[recipe_id] = updated
        return updated

    def delete_recipe(self, recipe_id: int) -> None:
        self.get_recipe(recipe_id)
        del self.recipes[recipe_id]
        for item_id in [i.id for i in self.recipe_items.values() if i.recipe_id == recipe_id]:
            del self.recipe_items[item_id]

    # -- inventory ----------------------------------------------------------

    def list_inventory(self) -> List[InventoryItem]:
        return sorted(self.inventory.values(), key=lambda i: i.id)

    def add_inventory_item(self, **fields) -> InventoryItem:
        item = InventoryItem(id=self._allocate("inventory"), **fields)
        self.inventory[item.id] = item
        return item

    # -- recipe items -------------------------------------------------------

    def list_recipe_items(self, recipe_id: int) -> List[RecipeItemWithDetails]:
        self.get_recipe(recipe_id)
        items = sorted(
            (i for i in self.recipe_items.values() if i.recipe_id == recipe_id),
            key=lambda i: i.id,
        )
        return [
            RecipeItemWithDetails(inventory_item=self.inventory[i.inventory_id], **i.model_dump())
            for i in items
            if i.inventory_id in self.inventory
        ]

    def add_recipe_item(self, recipe_id: int, data: RecipeItemCreate) -> RecipeItem:
        self.get_recipe(recipe_id)
        if data.inventory_id not in self.inventory:
            raise NotFoundError(f"Inventory item {data.inventory_id} not found")
        item = RecipeItem(id=self._allocate("recipe_item"), recipe_id=recipe_id, **data.model_dump())
        self.recipe_items[item.id] = item
        return item

    def remove_recipe_item(self, recipe_id: int, item_id: int) -> None:
        item: Optional[RecipeItem] = self.recipe_items.get(item_id)
        if item is None or item.recipe_id != recipe_id:
            raise NotFoundError(f"Recipe item {item_id} not found for recipe {recipe_id}")
        del self.recipe_items[item_id]


def seed_demo_data(store: RecipeStore) -> None:
    """Fill an empty store with a small Italian menu and its inventory."""
    flour = store.add_inventory_item(
        item_name="Tipo 00 Flour", unit_of_measurement="kg", box_or_package_qty=25,
        unit_price="$1.20", total_price="$30.00", ideal_qty=50, current_qty=40,
        shelf_life_days=180, category="dry goods",
    )
    tomatoes = store.add_inventory_item(
        item_name="San Marzano Tomatoes", unit_of_measurement="kg", box_or_package_qty=10,
        unit_price="$4.50", total_price="$45.00", ideal_qty=20, current_qty=8,
        shelf_life_days=365, category="canned",
    )
    mozzarella = store.add_inventory_item(
        item_name="Fior di Latte Mozzarella", unit_of_measurement="kg", box_or_package_qty=5,
        unit_price="$12.50", total_price="$62.50", ideal_qty=10, current_qty=2,
        shelf_life_days=14, category="dairy",
    )
    basil = store.add_inventory_item(
        item_name="Fresh Basil", unit_of_measurement="bunch", box_or_package_qty=10,
        unit_price="$1.75", total_price="$17.50", ideal_qty=12, current_qty=10,
        shelf_life_days=5, category="produce",
    )
    store.add_inventory_item(
        item_name="Guanciale", unit_of_measurement="kg", box_or_package_qty=2,
        unit_price="$22.00", total_price="$44.00", ideal_qty=4, current_qty=1,
        shelf_life_days=30, category="meat",
    )

    margherita = store.create_recipe(RecipeCreate(
        dish_name="Margherita Pizza", order_type="both", description="Tomato, mozzarella, basil",
        selling_price="$14.50", category="pizza",
    ))
    store.create_recipe(RecipeCreate(
        dish_name="Spaghetti Carbonara", order_type="dine_in", selling_price="$16.00", category="pasta",
    ))
    store.create_recipe(RecipeCreate(
        dish_name="Tiramisu", order_type="takeaway", category="dolci", is_active=False,
    ))

    for inventory_item, quantity, unit in [
        (flour, "0.25", "kg"),
        (tomatoes, "0.1", "kg"),
        (mozzarella, "0.125", "kg"),
        (basil, "0.2", "bunch"),
    ]:
        store.add_recipe_item(margherita.id, RecipeItemCreate(
            inventory_id=inventory_item.id, quantity_required=quantity, unit=unit,
        ))
    logger.info("Seeded development store with %d recipes", len(store.recipes))
