"""
Order line and order total calculators.

Pure functions over menu.services.MenuItemRef snapshots: no database access,
so pricing can be tested and reasoned about in isolation.

Usage:
    from orders.calculators import calculate_item_price, AddonSelection
    breakdown = calculate_item_price(item_ref, [variant_id], [AddonSelection(addon_id, 2)])
    breakdown.total_price
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence, Tuple

from core_backend.utils.money import ZERO, default_currency, quantize, to_decimal
from menu.services import MenuItemRef
from .exceptions import InvalidPriceError, InvalidSelectionError


@dataclass(frozen=True)
class AddonSelection:
    addon_id: str
    quantity: int = 1


@dataclass(frozen=True)
class VariantContribution:
    variant_id: str
    name: str
    price: Decimal


@dataclass(frozen=True)
class AddonContribution:
    addon_id: str
    name: str
    unit_price: Decimal
    quantity: int
    total_price: Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    """Unit price of one order line and where it came from."""

    base_price: Decimal
    variant_contributions: Tuple[VariantContribution, ...]
    addon_contributions: Tuple[AddonContribution, ...]
    addons_total: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def _money(amount) -> Decimal:
    return quantize(default_currency(), amount)


def _resolve_variants(item_ref: MenuItemRef, variant_ids: Sequence) -> Tuple[VariantContribution, ...]:
    if not item_ref.has_variants:
        if variant_ids:
            raise InvalidSelectionError(
                f"{item_ref.name} has no variants",
                {"menu_item_id": item_ref.id},
            )
        return ()

    if not variant_ids:
        raise InvalidSelectionError(
            f"Select a variant for {item_ref.name}",
            {"menu_item_id": item_ref.id},
        )

    contributions = []
    seen = set()
    for variant_id in variant_ids:
        variant = item_ref.get_variant(variant_id)
        if variant is None:
            raise InvalidSelectionError(
                f"Variant does not belong to {item_ref.name}",
                {"menu_item_id": item_ref.id, "variant_id": str(variant_id)},
            )
        if variant.id in seen:
            raise InvalidSelectionError(
                f"Variant {variant.name} selected more than once",
                {"menu_item_id": item_ref.id, "variant_id": variant.id},
            )
        if not variant.is_available:
            raise InvalidSelectionError(
                f"{item_ref.name} ({variant.name}) is not available",
                {"menu_item_id": item_ref.id, "variant_id": variant.id},
            )
        seen.add(variant.id)
        contributions.append(
            VariantContribution(variant_id=variant.id, name=variant.name, price=_money(variant.price))
        )
    return tuple(contributions)


def _resolve_addons(item_ref: MenuItemRef, addon_selections: Iterable[AddonSelection]) -> Tuple[AddonContribution, ...]:
    contributions = []
    seen = set()
    for selection in addon_selections:
        addon = item_ref.get_addon(selection.addon_id)
        if addon is None:
            raise InvalidSelectionError(
                f"Addon is not available for {item_ref.name}",
                {"menu_item_id": item_ref.id, "addon_id": str(selection.addon_id)},
            )
        if addon.addon_id in seen:
            raise InvalidSelectionError(
                f"Addon {addon.name} selected more than once",
                {"menu_item_id": item_ref.id, "addon_id": addon.addon_id},
            )
        if selection.quantity is None or selection.quantity < 1:
            raise InvalidSelectionError(
                f"Quantity for {addon.name} must be at least 1",
                {"addon_id": addon.addon_id, "quantity": selection.quantity},
            )
        if addon.max_quantity is not None and selection.quantity > addon.max_quantity:
            raise InvalidSelectionError(
                f"At most {addon.max_quantity} of {addon.name} allowed on {item_ref.name}",
                {"addon_id": addon.addon_id, "quantity": selection.quantity},
            )
        seen.add(addon.addon_id)
        unit_price = _money(addon.effective_price)
        contributions.append(
            AddonContribution(
                addon_id=addon.addon_id,
                name=addon.name,
                unit_price=unit_price,
                quantity=selection.quantity,
                total_price=_money(unit_price * selection.quantity),
            )
        )
    return tuple(contributions)


def calculate_item_price(
    item_ref: MenuItemRef,
    variant_ids: Sequence = (),
    addon_selections: Iterable[AddonSelection] = (),
) -> PriceBreakdown:
    """
    Price one unit of a menu item with its selected variants and addons.

    Items with variants are priced by the sum of the selected variant prices
    and report a base price of 0. Items without variants use their base price.

    Raises:
        InvalidSelectionError: unavailable item, missing/foreign/unavailable
            variant, ineligible addon or bad addon quantity
    """
    if not item_ref.is_available:
        raise InvalidSelectionError(
            f"{item_ref.name} is not available",
            {"menu_item_id": item_ref.id},
        )

    variants = _resolve_variants(item_ref, variant_ids or ())
    if variants:
        base_price = ZERO
        priced_base = sum((v.price for v in variants), ZERO)
    else:
        if item_ref.base_price is None:
            raise InvalidSelectionError(
                f"{item_ref.name} has no price configured",
                {"menu_item_id": item_ref.id},
            )
        base_price = _money(item_ref.base_price)
        priced_base = base_price

    addons = _resolve_addons(item_ref, addon_selections or ())
    addons_total = sum((a.total_price for a in addons), ZERO)

    return PriceBreakdown(
        base_price=base_price,
        variant_contributions=variants,
        addon_contributions=addons,
        addons_total=_money(addons_total),
        total_price=_money(priced_base + addons_total),
    )


def validate_price_override(value) -> Optional[Decimal]:
    """
    Parse a staff-entered unit price. None means no override.

    Raises:
        InvalidPriceError: value is not a finite, non-negative number
    """
    if value is None or value == "":
        return None
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPriceError(details={"unit_price_override": str(value)})
    if not amount.is_finite() or amount < 0:
        raise InvalidPriceError(details={"unit_price_override": str(value)})
    return _money(amount)


def calculate_order_totals(line_totals: Iterable) -> OrderTotals:
    """Subtotal of the line totals. Tax is always zero."""
    subtotal = _money(sum((to_decimal(total) for total in line_totals), ZERO))
    tax = _money(ZERO)
    return OrderTotals(subtotal=subtotal, tax=tax, total=_money(subtotal + tax))
