"""
Inventory stock check handler.
"""

from typing import List

from ..formatter import INVENTORY_ORDERS_PATH, format_number, link
from ..lookup import find_product
from ..models import IntentCategory
from ..router import HandlerContext, register


def handle_inventory_check(ctx: HandlerContext) -> List[str]:
    query = ctx.params.get("query", "")
    product = find_product(ctx.snapshot, query)
    if product is None:
        return [f'❓ I couldn\'t find a product matching "{query}". Try searching by SKU or full name.']

    on_hand = ctx.snapshot.stock_on_hand(product)
    lines = [
        f"📦 **Inventory Check: {product.name}**",
        f"We currently have **{format_number(on_hand)} {product.unit}(s)** in stock across all locations.",
    ]
    if on_hand <= product.min_stock:
        lines.append(
            f"⚠️ **Low Stock Warning:** We are below the minimum level of {format_number(product.min_stock)}."
        )
        lines.append(link("Order More", INVENTORY_ORDERS_PATH))
    return lines


def register_handlers() -> None:
    register(IntentCategory.INVENTORY_CHECK, handle_inventory_check)
