"""Unit tests for the Promotion value."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fulfillment.domain.model.promotion import ALL_ITEMS, Promotion, PromotionType
from fulfillment.domain.model.value_objects import Money

START = datetime(2026, 1, 1, tzinfo=timezone.utc)
END = datetime(2026, 12, 31, tzinfo=timezone.utc)


def _discount(rate: str = "0.8", target: str = ALL_ITEMS, active: bool = True) -> Promotion:
    return Promotion.discount("PROMO001", "Sale", Decimal(rate), START, END, target, active)


def _reduction(threshold: str = "300", reduction: str = "50") -> Promotion:
    return Promotion.full_reduction(
        "PROMO002", "Tier", Money.of(threshold), Money.of(reduction), START, END
    )


class TestValidity:

    def test_window_is_inclusive(self):
        promo = _discount()
        assert promo.is_valid(START)
        assert promo.is_valid(END)

    def test_outside_window(self):
        promo = _discount()
        assert not promo.is_valid(START - timedelta(seconds=1))
        assert not promo.is_valid(END + timedelta(seconds=1))

    def test_inactive_never_valid(self):
        promo = _discount(active=False)
        assert not promo.is_valid(START + timedelta(days=1))


class TestDiscount:

    def test_kind(self):
        promo = _discount()
        assert promo.kind == PromotionType.DISCOUNT
        assert promo.is_discount
        assert not promo.is_full_reduction
        assert promo.threshold is None

    def test_all_items_target(self):
        promo = _discount()
        assert promo.applies_to("1")
        assert promo.applies_to("42")

    def test_single_item_target(self):
        promo = _discount(target="3")
        assert promo.applies_to("3")
        assert not promo.applies_to("4")

    def test_price_for(self):
        assert _discount("0.8").price_for(Money.of("400")) == Money.of("320.00")

    def test_reduction_for_is_zero(self):
        assert _discount().reduction_for(Money.of("1000")).is_zero

    def test_tag_truncates(self):
        assert _discount("0.8").display_tag() == "8折"
        assert _discount("0.75").display_tag() == "7折"
        assert _discount("0.95").display_tag() == "9折"


class TestFullReduction:

    def test_kind(self):
        promo = _reduction()
        assert promo.is_full_reduction
        assert promo.discount_rate is None
        assert promo.target_item_id is None

    def test_never_applies_to_items(self):
        promo = _reduction()
        assert not promo.applies_to("1")
        assert promo.price_for(Money.of("10")) == Money.of("10")

    def test_threshold_is_inclusive(self):
        promo = _reduction("300", "50")
        assert promo.reduction_for(Money.of("300")) == Money.of("50")
        assert promo.reduction_for(Money.of("299.99")).is_zero

    def test_tag(self):
        assert _reduction("700", "50").display_tag() == "满700减50"
        assert _reduction("99.90", "10.50").display_tag() == "满99减10"
