"""
Read-only menu lookups used by the order service.

The order core prices lines against an immutable snapshot of a menu item so
the calculator never touches the database.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Tuple

from django.core.exceptions import ValidationError as DjangoValidationError

from .models import MenuItem, CategoryAddon, ItemAddon


@dataclass(frozen=True)
class VariantRef:
    id: str
    name: str
    price: Decimal
    is_available: bool = True


@dataclass(frozen=True)
class AddonEligibility:
    addon_id: str
    name: str
    base_price: Decimal
    category_price_override: Optional[Decimal] = None
    item_price_override: Optional[Decimal] = None
    max_quantity: Optional[int] = None

    @property
    def effective_price(self) -> Decimal:
        # First non-null wins: item rule, then category preset, then addon price
        if self.item_price_override is not None:
            return self.item_price_override
        if self.category_price_override is not None:
            return self.category_price_override
        return self.base_price


@dataclass(frozen=True)
class MenuItemRef:
    id: str
    name: str
    base_price: Optional[Decimal]
    has_variants: bool
    is_available: bool
    variants: Tuple[VariantRef, ...] = ()
    addons: Dict[str, AddonEligibility] = field(default_factory=dict)

    def get_variant(self, variant_id) -> Optional[VariantRef]:
        variant_id = str(variant_id)
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def get_addon(self, addon_id) -> Optional[AddonEligibility]:
        return self.addons.get(str(addon_id))


class MenuLookupService:
    """
    Builds MenuItemRef snapshots from the menu tables.
    """

    @staticmethod
    def get_item_ref(item_id) -> Optional[MenuItemRef]:
        """
        Return the priced snapshot of a menu item, or None when it does not exist.

        Addon eligibility: an addon is offered when its category link is
        active or an item rule allows it, unless an item rule disallows it.
        Unavailable addons are never offered.
        """
        try:
            item = (
                MenuItem.objects.select_related("category")
                .prefetch_related("variants")
                .get(pk=item_id)
            )
        except (MenuItem.DoesNotExist, DjangoValidationError, ValueError):
            # Malformed UUIDs surface as validation/value errors
            return None

        variants = tuple(
            VariantRef(
                id=str(variant.id),
                name=variant.name,
                price=variant.price,
                is_available=variant.is_available,
            )
            for variant in item.variants.all()
        )

        category_links = {
            str(link.addon_id): link
            for link in CategoryAddon.objects.select_related("addon").filter(
                category_id=item.category_id,
                is_active=True,
                addon__is_available=True,
            )
        }
        item_rules = {
            str(rule.addon_id): rule
            for rule in ItemAddon.objects.select_related("addon").filter(
                menu_item=item,
                addon__is_available=True,
            )
        }

        addons = {}
        for addon_id in set(category_links) | set(item_rules):
            link = category_links.get(addon_id)
            rule = item_rules.get(addon_id)
            if rule is not None and not rule.is_allowed:
                continue
            addon = (rule or link).addon
            addons[addon_id] = AddonEligibility(
                addon_id=addon_id,
                name=addon.name,
                base_price=addon.price,
                category_price_override=link.price_override if link else None,
                item_price_override=rule.price_override if rule else None,
                max_quantity=rule.max_quantity if rule else None,
            )

        return MenuItemRef(
            id=str(item.id),
            name=item.name,
            base_price=item.base_price,
            has_variants=item.has_variants,
            is_available=item.is_available,
            variants=variants,
            addons=addons,
        )
