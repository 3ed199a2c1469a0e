"""
Status badges for the recipe screen.

Each helper maps a value to a short label and a Streamlit colour, returned as
coloured-background markdown (`:color-background[label]`).
"""

from kitchen.costing import STOCK_CRITICAL, STOCK_LOW, stock_status
from kitchen.models import ORDER_TYPE_BOTH, ORDER_TYPE_DINE_IN, InventoryItem, Recipe

_STOCK_STYLES = {
    STOCK_CRITICAL: ("red", "⚠️ Critical"),
    STOCK_LOW: ("orange", "Low"),
}

_ORDER_TYPE_STYLES = {
    ORDER_TYPE_DINE_IN: ("blue", "Dine In"),
    ORDER_TYPE_BOTH: ("violet", "Versatile"),
}


def order_type_label(order_type: str) -> str:
    """Plain-text label for tables. Anything else reads as Takeaway."""
    return _ORDER_TYPE_STYLES.get(order_type, ("green", "Takeaway"))[1]


def order_type_badge(order_type: str) -> str:
    """Badge markdown for a recipe's order type."""
    color, label = _ORDER_TYPE_STYLES.get(order_type, ("green", "Takeaway"))
    return f":{color}-background[{label}]"


def active_badge(recipe: Recipe) -> str:
    return ":green-background[Active]" if recipe.is_active else ":gray-background[Inactive]"


def stock_badge(item: InventoryItem) -> str:
    """Badge markdown for an inventory item's stock health."""
    status = stock_status(item.current_qty, item.ideal_qty)
    color, label = _STOCK_STYLES.get(status, ("green", "✓ Good"))
    return f":{color}-background[{label}]"
