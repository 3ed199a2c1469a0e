"""
Form structs and validation for the recipe screen.

Each form is a plain dataclass holding exactly what the user typed, so it can be
re-rendered after a failed submission without losing input. Validation is a pure
function returning a list of FieldError (empty when the form is valid); it never
raises. The constraints themselves live in pydantic models, which also produce
the JSON payload sent to the API.

# NOTE: Quantities are kept as text all the way to the API. Only kitchen.costing
    interprets them numerically.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kitchen.models import ORDER_TYPE_DINE_IN, Recipe


@dataclass(frozen=True)
class FieldError:
    """A validation message attached to one form field."""
    field: str
    message: str


class RecipePayload(BaseModel):
    """Constraints for the recipe form (create and update)."""
    dish_name: str = Field(..., min_length=2, alias="dishName")
    order_type: str = Field(..., min_length=1, alias="orderType")
    description: Optional[str] = None
    selling_price: Optional[str] = Field(None, alias="sellingPrice")
    category: Optional[str] = None
    is_active: bool = Field(True, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)


class RecipeItemPayload(BaseModel):
    """Constraints for the add-ingredient form."""
    inventory_id: int = Field(..., ge=1, alias="inventoryId")
    quantity_required: str = Field(..., min_length=1, alias="quantityRequired")
    unit: str = Field(..., min_length=1)

    model_config = ConfigDict(populate_by_name=True)


# One message per field, shown under the offending input
RECIPE_FIELD_MESSAGES = {
    "dish_name": "Dish name must be at least 2 characters",
    "order_type": "Order type is required",
    "description": "Description must be text",
    "selling_price": "Selling price must be text",
    "category": "Category must be text",
    "is_active": "Active must be true or false",
}

RECIPE_ITEM_FIELD_MESSAGES = {
    "inventory_id": "You must select an ingredient",
    "quantity_required": "Quantity is required",
    "unit": "Unit is required",
}


@dataclass
class RecipeFormData:
    """Values of the add/edit recipe form."""
    dish_name: str = ""
    order_type: str = ORDER_TYPE_DINE_IN
    description: Optional[str] = ""
    selling_price: Optional[str] = ""
    category: Optional[str] = ""
    is_active: bool = True

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeFormData":
        """
        Seed the edit form from an existing recipe.

        Null optional fields become empty strings so text inputs never receive None.
        """
        return cls(
            dish_name=recipe.dish_name,
            order_type=recipe.order_type,
            description=recipe.description or "",
            selling_price=recipe.selling_price or "",
            category=recipe.category or "",
            is_active=recipe.is_active,
        )


@dataclass
class RecipeItemFormData:
    """Values of the add-ingredient form. inventory_id 0 means nothing selected."""
    inventory_id: Any = 0
    quantity_required: str = ""
    unit: str = ""


def _field_errors(
    exc: ValidationError, model: Type[BaseModel], messages: Dict[str, str]
) -> List[FieldError]:
    # Errors may be located by alias or by attribute name
    names = {info.alias: name for name, info in model.model_fields.items() if info.alias}
    errors: List[FieldError] = []
    seen = set()
    for err in exc.errors():
        loc = str(err["loc"][0]) if err.get("loc") else "__root__"
        field = names.get(loc, loc)
        if field in seen:
            continue
        seen.add(field)
        errors.append(FieldError(field=field, message=messages.get(field, err.get("msg", "Invalid value"))))
    return errors


def validate_recipe_form(form: RecipeFormData) -> List[FieldError]:
    """
    Validate the recipe form.

    Dish name needs at least 2 characters and order type must be non-empty.
    Description, selling price and category are optional; active defaults to True.

    Returns:
        List of FieldError, empty when the form can be submitted.
    """
    try:
        RecipePayload.model_validate(asdict(form))
    except ValidationError as exc:
        return _field_errors(exc, RecipePayload, RECIPE_FIELD_MESSAGES)
    return []


def validate_recipe_item_form(form: RecipeItemFormData) -> List[FieldError]:
    """
    Validate the add-ingredient form.

    The inventory reference is coerced to an integer and must be at least 1 (0 is
    "unselected"). Quantity and unit must be non-empty text.
    """
    try:
        RecipeItemPayload.model_validate(asdict(form))
    except ValidationError as exc:
        return _field_errors(exc, RecipeItemPayload, RECIPE_ITEM_FIELD_MESSAGES)
    return []


def recipe_payload(form: RecipeFormData) -> Dict[str, Any]:
    """Build the camelCase JSON body for create/update. The form must be valid."""
    return RecipePayload.model_validate(asdict(form)).model_dump(by_alias=True)


def recipe_item_payload(form: RecipeItemFormData) -> Dict[str, Any]:
    """Build the camelCase JSON body for adding an ingredient. The form must be valid."""
    return RecipeItemPayload.model_validate(asdict(form)).model_dump(by_alias=True)


def errors_by_field(errors: List[FieldError]) -> Dict[str, str]:
    """Index field errors by field name for rendering next to inputs."""
    return {error.field: error.message for error in errors}
