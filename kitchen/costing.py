"""
Derived values shown on the recipe screen.

Two pure helpers are provided:
- stock_status(): classifies an inventory item as "Critical", "Low" or "Good"
  from its current vs. ideal quantity.
- estimate_recipe_cost(): sums unit price x required quantity over a recipe's
  ingredients using current inventory prices.

Both are stateless and have no side effects. Malformed prices or quantities never
raise: the affected ingredient simply contributes nothing to the estimate.
"""

import logging
import re
from typing import Iterable, Optional

from kitchen.models import RecipeItemWithDetails

logger = logging.getLogger(__name__)

STOCK_CRITICAL = "Critical"
STOCK_LOW = "Low"
STOCK_GOOD = "Good"

# Upper bound (inclusive) of each band, as a fraction of the ideal quantity
CRITICAL_RATIO = 0.25
LOW_RATIO = 0.5

# Leading decimal number, same prefix rules as a browser's parseFloat()
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_NON_PRICE_CHARS = re.compile(r"[^0-9.]")


def stock_status(current: float, ideal: float) -> str:
    """
    Classify stock health from current and ideal quantity.

    Bands on ratio = current / ideal:
    - ratio <= 0.25        -> "Critical"
    - 0.25 < ratio <= 0.5  -> "Low"
    - ratio > 0.5          -> "Good"

    An ideal quantity of zero (or less) has no meaningful ratio: anything in stock
    is "Good" and an empty shelf is "Critical".

    Examples:
        >>> stock_status(25, 100)
        'Critical'
        >>> stock_status(50, 100)
        'Low'
        >>> stock_status(51, 100)
        'Good'
    """
    if ideal <= 0:
        return STOCK_GOOD if current > 0 else STOCK_CRITICAL

    ratio = current / ideal
    if ratio <= CRITICAL_RATIO:
        return STOCK_CRITICAL
    if ratio <= LOW_RATIO:
        return STOCK_LOW
    return STOCK_GOOD


def parse_decimal(text: Optional[str]) -> Optional[float]:
    """
    Parse the leading decimal number of a string.

    Trailing garbage is ignored ("2 kg" -> 2.0), anything without a leading number
    yields None.
    """
    if text is None:
        return None
    match = _LEADING_NUMBER.match(str(text))
    if not match:
        return None
    return float(match.group(1))


def parse_price(text: Optional[str]) -> Optional[float]:
    """
    Parse a decimal-as-text price such as "$12.50" or "1,250.00 EUR".

    Every character that is not a digit or "." is stripped first.
    """
    if text is None:
        return None
    return parse_decimal(_NON_PRICE_CHARS.sub("", str(text)))


def estimate_recipe_cost(items: Iterable[RecipeItemWithDetails]) -> float:
    """
    Estimate the cost of a recipe from its ingredient lines.

    Each line contributes unit price x required quantity. A line whose price or
    quantity cannot be parsed contributes 0 instead of invalidating the estimate.

    Args:
        items: Recipe items joined with their inventory items

    Returns:
        Total cost as a float (0.0 for no items). Use format_cost() for display.
    """
    total = 0.0
    for item in items:
        unit_price = parse_price(item.inventory_item.unit_price)
        quantity = parse_decimal(item.quantity_required)
        if unit_price is None or quantity is None:
            logger.debug(
                "Skipping recipe item %s in cost estimate (price=%r, quantity=%r)",
                item.id, item.inventory_item.unit_price, item.quantity_required,
            )
            continue
        total += unit_price * quantity
    return total


def format_cost(total: float) -> str:
    """Format a cost estimate for display, rounded to cents (e.g. '$25.00')."""
    return f"${total:.2f}"
