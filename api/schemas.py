"""
Pydantic schemas for the development backend's request bodies.

Response bodies reuse kitchen.models (Recipe, InventoryItem, RecipeItem,
RecipeItemWithDetails), which FastAPI serializes by alias, i.e. in camelCase.

The schemas include:
- RecipeCreate: body of POST /api/recipes
- RecipeUpdate: body of PATCH /api/recipes/{id} (every field optional)
- RecipeItemCreate: body of POST /api/recipes/{id}/items
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RecipeCreate(BaseModel):
    """Input model for creating a recipe."""
    dish_name: str = Field(..., min_length=2, alias="dishName", description="Dish name")
    order_type: str = Field(..., min_length=1, alias="orderType", description="dine_in, takeaway or both")
    description: Optional[str] = Field(None, description="Free-text description")
    selling_price: Optional[str] = Field(None, alias="sellingPrice", description="Selling price as text")
    category: Optional[str] = Field(None, description="Menu category")
    is_active: bool = Field(True, alias="isActive", description="Whether the dish is on the menu")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "dishName": "Spaghetti Carbonara",
                "orderType": "dine_in",
                "description": "Guanciale, egg yolk, pecorino",
                "sellingPrice": "$16.00",
                "category": "pasta",
                "isActive": True,
            }
        },
    )


class RecipeUpdate(BaseModel):
    """Input model for a partial recipe update; omitted fields are left unchanged."""
    dish_name: Optional[str] = Field(None, min_length=2, alias="dishName")
    order_type: Optional[str] = Field(None, min_length=1, alias="orderType")
    description: Optional[str] = None
    selling_price: Optional[str] = Field(None, alias="sellingPrice")
    category: Optional[str] = None
    is_active: Optional[bool] = Field(None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)


class RecipeItemCreate(BaseModel):
    """Input model for adding an ingredient to a recipe."""
    inventory_id: int = Field(..., ge=1, alias="inventoryId", description="Inventory item to use")
    quantity_required: str = Field(..., min_length=1, alias="quantityRequired", description="Quantity as text")
    unit: str = Field(..., min_length=1, description="kg, g, liter, ml, bunch, piece or unit")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {"inventoryId": 3, "quantityRequired": "0.2", "unit": "kg"}
        },
    )
