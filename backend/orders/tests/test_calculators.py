"""
Price Calculator Tests

These tests verify line pricing against menu snapshots: variant pricing,
addon price precedence, eligibility rules, staff overrides and order totals.

Priority: CRITICAL - Every rupee on a receipt comes out of these functions
"""
import pytest
from decimal import Decimal

from menu.services import AddonEligibility, MenuItemRef, MenuLookupService, VariantRef
from orders.calculators import (
    AddonSelection,
    calculate_item_price,
    calculate_order_totals,
    validate_price_override,
)
from orders.exceptions import InvalidPriceError, InvalidSelectionError


def make_item(**overrides):
    """Grilled chicken snapshot: 4oz/6oz/8oz variants, quinoa preset to 50."""
    data = dict(
        id="item-1",
        name="Grilled Chicken",
        base_price=None,
        has_variants=True,
        is_available=True,
        variants=(
            VariantRef(id="v-4", name="4oz", price=Decimal("199.00")),
            VariantRef(id="v-6", name="6oz", price=Decimal("259.00")),
            VariantRef(id="v-8", name="8oz", price=Decimal("319.00"), is_available=False),
        ),
        addons={
            "a-quinoa": AddonEligibility(
                addon_id="a-quinoa",
                name="Quinoa",
                base_price=Decimal("60.00"),
                category_price_override=Decimal("50.00"),
            ),
            "a-egg": AddonEligibility(
                addon_id="a-egg",
                name="Boiled Egg",
                base_price=Decimal("20.00"),
                max_quantity=3,
            ),
        },
    )
    data.update(overrides)
    return MenuItemRef(**data)


class TestVariantPricing:
    """Items priced by base price or by selected variants"""

    def test_variant_price_replaces_base_price(self):
        """
        CRITICAL: Items with variants are priced entirely by the selected variant

        Business Impact: A 6oz portion must ring up at the 6oz price
        """
        breakdown = calculate_item_price(make_item(), ["v-6"])

        assert breakdown.base_price == Decimal("0.00")
        assert [v.price for v in breakdown.variant_contributions] == [Decimal("259.00")]
        assert breakdown.addons_total == Decimal("0.00")
        assert breakdown.total_price == Decimal("259.00")

    def test_multiple_variants_are_summed(self):
        breakdown = calculate_item_price(make_item(), ["v-4", "v-6"])
        assert breakdown.total_price == Decimal("458.00")

    def test_item_without_variants_uses_base_price(self):
        item = make_item(has_variants=False, base_price=Decimal("120.00"), variants=())

        breakdown = calculate_item_price(item)

        assert breakdown.base_price == Decimal("120.00")
        assert breakdown.total_price == Decimal("120.00")

    def test_variant_required(self):
        """
        CRITICAL: Items that need a variant cannot be sold without one

        Business Impact: Prevents a zero-priced line for variant-priced items
        """
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(make_item(), [])

    def test_foreign_variant_rejected(self):
        with pytest.raises(InvalidSelectionError) as exc_info:
            calculate_item_price(make_item(), ["v-from-another-item"])
        assert exc_info.value.details["variant_id"] == "v-from-another-item"

    def test_unavailable_variant_rejected(self):
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(make_item(), ["v-8"])

    def test_duplicate_variant_rejected(self):
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(make_item(), ["v-6", "v-6"])

    def test_variant_on_item_without_variants_rejected(self):
        item = make_item(has_variants=False, base_price=Decimal("120.00"), variants=())
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(item, ["v-6"])

    def test_item_without_price_rejected(self):
        item = make_item(has_variants=False, base_price=None, variants=())
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(item)

    def test_unavailable_item_rejected(self):
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(make_item(is_available=False), ["v-6"])


class TestAddonPricing:
    """Addon eligibility and price precedence"""

    def test_worked_example_single_line(self):
        """
        CRITICAL: 6oz (259) + Quinoa at the category preset (50) x 2 = 359

        Business Impact: Category presets are how the café prices the same
        addon differently per section of the menu
        """
        breakdown = calculate_item_price(
            make_item(), ["v-6"], [AddonSelection(addon_id="a-quinoa", quantity=2)]
        )

        quinoa = breakdown.addon_contributions[0]
        assert quinoa.unit_price == Decimal("50.00")
        assert quinoa.total_price == Decimal("100.00")
        assert breakdown.addons_total == Decimal("100.00")
        assert breakdown.total_price == Decimal("359.00")

    @pytest.mark.parametrize(
        "item_override,category_override,expected",
        [
            (Decimal("45.00"), Decimal("50.00"), Decimal("45.00")),
            (None, Decimal("50.00"), Decimal("50.00")),
            (None, None, Decimal("60.00")),
            (Decimal("0.00"), Decimal("50.00"), Decimal("0.00")),
        ],
    )
    def test_addon_price_precedence(self, item_override, category_override, expected):
        """
        CRITICAL: Addon price resolves item override, then category override, then base price

        Business Impact: A free addon (item override 0) must not fall back to a paid price
        """
        addon = AddonEligibility(
            addon_id="a-quinoa",
            name="Quinoa",
            base_price=Decimal("60.00"),
            category_price_override=category_override,
            item_price_override=item_override,
        )
        item = make_item(addons={"a-quinoa": addon})

        breakdown = calculate_item_price(item, ["v-6"], [AddonSelection("a-quinoa", 1)])

        assert breakdown.addons_total == expected
        assert breakdown.total_price == Decimal("259.00") + expected

    def test_ineligible_addon_rejected(self):
        with pytest.raises(InvalidSelectionError) as exc_info:
            calculate_item_price(make_item(), ["v-6"], [AddonSelection("a-unknown", 1)])
        assert exc_info.value.code == "INVALID_SELECTION"

    def test_addon_quantity_must_be_positive(self):
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(make_item(), ["v-6"], [AddonSelection("a-quinoa", 0)])

    def test_addon_quantity_capped_by_item_rule(self):
        calculate_item_price(make_item(), ["v-6"], [AddonSelection("a-egg", 3)])
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(make_item(), ["v-6"], [AddonSelection("a-egg", 4)])

    def test_duplicate_addon_rejected(self):
        with pytest.raises(InvalidSelectionError):
            calculate_item_price(
                make_item(), ["v-6"], [AddonSelection("a-quinoa", 1), AddonSelection("a-quinoa", 1)]
            )


class TestPriceOverride:
    """Staff-entered unit prices"""

    @pytest.mark.parametrize("value,expected", [
        ("100", Decimal("100.00")),
        (99.5, Decimal("99.50")),
        (0, Decimal("0.00")),
        ("12.345", Decimal("12.34")),
    ])
    def test_valid_override(self, value, expected):
        assert validate_price_override(value) == expected

    def test_missing_override_means_no_override(self):
        assert validate_price_override(None) is None
        assert validate_price_override("") is None

    @pytest.mark.parametrize("value", ["-1", -0.01, "abc", "NaN", "Infinity", True])
    def test_invalid_override_rejected(self, value):
        """
        CRITICAL: Overrides must be non-negative numbers

        Business Impact: A negative override would pay the customer to order
        """
        with pytest.raises(InvalidPriceError):
            validate_price_override(value)


class TestOrderTotals:

    def test_worked_example_order_total(self):
        """
        CRITICAL: Lines of 359 x 1 and 359 x 2 total 1077 with zero tax

        Business Impact: The domain charges no tax; the total is the subtotal
        """
        totals = calculate_order_totals([Decimal("359.00") * 1, Decimal("359.00") * 2])

        assert totals.subtotal == Decimal("1077.00")
        assert totals.tax == Decimal("0.00")
        assert totals.total == Decimal("1077.00")

    def test_empty_totals_are_zero(self):
        totals = calculate_order_totals([])
        assert totals.total == Decimal("0.00")


@pytest.mark.django_db
class TestPricingAgainstMenu:
    """The calculator fed by real menu rows"""

    def test_category_preset_applied_from_menu(self, grilled_chicken, variant_6oz, quinoa_addon):
        """
        CRITICAL: The worked example priced from the menu tables

        Business Impact: Menu snapshots must carry the category preset through
        """
        item_ref = MenuLookupService.get_item_ref(grilled_chicken.id)

        breakdown = calculate_item_price(
            item_ref, [str(variant_6oz.id)], [AddonSelection(str(quinoa_addon.id), 2)]
        )

        assert breakdown.total_price == Decimal("359.00")

    def test_unlinked_addon_not_eligible(self, grilled_chicken, variant_6oz, egg_addon):
        item_ref = MenuLookupService.get_item_ref(grilled_chicken.id)

        with pytest.raises(InvalidSelectionError):
            calculate_item_price(item_ref, [str(variant_6oz.id)], [AddonSelection(str(egg_addon.id), 1)])
