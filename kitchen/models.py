"""
Recipe, inventory and recipe-item models for the recipe management screen.

These models mirror the JSON returned by the recipes API. The API speaks camelCase
(`dishName`, `quantityRequired`, ...) while the Python side uses snake_case
attributes; every field carries an explicit alias so `model_validate()` accepts API
payloads and `model_dump(by_alias=True)` produces them.

# NOTE: The API owns these records. The frontend only holds read-only copies and
    replaces them wholesale with whatever a successful mutation returns.

Prices and required quantities are decimal-as-text (e.g. "$12.50", "0.5") and are
only interpreted numerically by kitchen.costing.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Order types offered by the recipe forms
ORDER_TYPE_DINE_IN = "dine_in"
ORDER_TYPE_TAKEAWAY = "takeaway"
ORDER_TYPE_BOTH = "both"

ORDER_TYPES = [ORDER_TYPE_DINE_IN, ORDER_TYPE_TAKEAWAY, ORDER_TYPE_BOTH]

ORDER_TYPE_LABELS = {
    ORDER_TYPE_DINE_IN: "Dine In",
    ORDER_TYPE_TAKEAWAY: "Takeaway",
    ORDER_TYPE_BOTH: "Both",
}

# Menu categories offered by the recipe forms
RECIPE_CATEGORIES = ["antipasti", "pasta", "pizza", "risotto", "secondi", "dolci"]

# Units offered by the add-ingredient form
INGREDIENT_UNITS = ["kg", "g", "liter", "ml", "bunch", "piece", "unit"]


class Recipe(BaseModel):
    """A dish on the menu."""
    id: int = Field(..., description="Recipe identifier")
    dish_name: str = Field(..., alias="dishName", description="Dish name (at least 2 characters)")
    order_type: str = Field(..., alias="orderType", description="dine_in, takeaway or both")
    description: Optional[str] = Field(None, description="Free-text description")
    selling_price: Optional[str] = Field(None, alias="sellingPrice", description="Selling price as text, e.g. '$19.99'")
    category: Optional[str] = Field(None, description="Menu category")
    is_active: bool = Field(True, alias="isActive", description="Whether the dish is on the menu")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "dishName": "Margherita Pizza",
                "orderType": "both",
                "description": "Tomato, mozzarella, basil",
                "sellingPrice": "$14.50",
                "category": "pizza",
                "isActive": True,
            }
        },
    )


class InventoryItem(BaseModel):
    """An ingredient in the inventory catalog."""
    id: int = Field(..., description="Inventory item identifier")
    item_name: str = Field(..., alias="itemName")
    unit_of_measurement: str = Field(..., alias="unitOfMeasurement")
    box_or_package_qty: float = Field(0, ge=0, alias="boxOrPackageQty")
    unit_price: str = Field(..., alias="unitPrice", description="Unit price as text, e.g. '$12.50'")
    total_price: str = Field("0", alias="totalPrice")
    ideal_qty: float = Field(..., ge=0, alias="idealQty", description="Target stock level")
    current_qty: float = Field(..., ge=0, alias="currentQty", description="Current stock level")
    shelf_life_days: Optional[int] = Field(None, alias="shelfLifeDays")
    last_updated: Optional[datetime] = Field(None, alias="lastUpdated")
    category: Optional[str] = Field(None)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def picker_label(self) -> str:
        """Label used in the ingredient picker, e.g. 'Flour (kg)'."""
        return f"{self.item_name} ({self.unit_of_measurement})"


class RecipeItem(BaseModel):
    """Join record linking a recipe to one inventory ingredient."""
    id: int
    recipe_id: int = Field(..., alias="recipeId")
    inventory_id: int = Field(..., alias="inventoryId")
    quantity_required: str = Field(..., alias="quantityRequired", description="Required quantity as text")
    unit: str

    model_config = ConfigDict(populate_by_name=True)


class RecipeItemWithDetails(RecipeItem):
    """A recipe item joined with the inventory item it references (read projection)."""
    inventory_item: InventoryItem = Field(..., alias="inventoryItem")
