from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models.coupon import DiscountType
from app.schemas.cart import LineItem
from app.services.pricing_engine import PricingEngine, calculate_totals
from app.utils.price import format_price, paise_to_rupees, rupees_to_paise


def items(*pairs):
    return [LineItem(unit_price=price, quantity=qty) for price, qty in pairs]


def percentage(value):
    return SimpleNamespace(discount_type=DiscountType.PERCENTAGE, discount_value=value)


def flat(value):
    return SimpleNamespace(discount_type=DiscountType.FLAT, discount_value=value)


def test_single_item_below_threshold_pays_shipping():
    totals = calculate_totals(items((30000, 1)))
    assert totals.model_dump() == {"subtotal": 30000, "shipping": 5000, "discount": 0, "total": 35000}


def test_percentage_coupon_above_threshold():
    totals = calculate_totals(items((60000, 1)), percentage(10))
    assert totals.model_dump() == {"subtotal": 60000, "shipping": 0, "discount": 6000, "total": 54000}


def test_flat_coupon_larger_than_order_clamps_total_to_zero():
    totals = calculate_totals(items((10000, 1)), flat(50000))
    # discount is reported verbatim, only the total is clamped
    assert totals.model_dump() == {"subtotal": 10000, "shipping": 5000, "discount": 50000, "total": 0}


def test_empty_cart_still_charges_shipping():
    totals = calculate_totals([])
    assert totals.model_dump() == {"subtotal": 0, "shipping": 5000, "discount": 0, "total": 5000}


def test_subtotal_sums_price_times_quantity():
    assert PricingEngine.calculate_subtotal(items((1999, 3), (0, 5), (250, 2))) == 1999 * 3 + 500


def test_zero_price_items():
    totals = calculate_totals(items((0, 4)))
    assert totals.subtotal == 0
    assert totals.total == 5000


@pytest.mark.parametrize("subtotal,expected", [
    (49999, 5000),
    (50000, 0),
    (50001, 0),
    (0, 5000),
])
def test_shipping_threshold_is_inclusive(subtotal, expected):
    assert PricingEngine.calculate_shipping(subtotal) == expected


@pytest.mark.parametrize("subtotal,value,expected", [
    (999, 10, 99),       # 99.9 floors to 99
    (12345, 15, 1851),   # 1851.75 floors to 1851
    (100, 33, 33),
    (60000, 0, 0),
    (60000, 100, 60000),
])
def test_percentage_discount_floors(subtotal, value, expected):
    assert PricingEngine.calculate_discount(subtotal, percentage(value)) == expected


def test_no_coupon_no_discount():
    assert PricingEngine.calculate_discount(60000, None) == 0


def test_total_formula_and_non_negativity():
    carts = [items((30000, 1)), items((25000, 2)), items((100, 1)), []]
    coupons = [None, percentage(50), flat(1000), flat(10 ** 7)]
    for cart in carts:
        for coupon in coupons:
            t = calculate_totals(cart, coupon)
            assert t.total >= 0
            assert t.total == max(0, t.subtotal + t.shipping - t.discount)


def test_calculate_totals_is_deterministic():
    cart = items((12345, 2), (999, 7))
    coupon = percentage(15)
    assert calculate_totals(cart, coupon) == calculate_totals(cart, coupon)


def test_format_price():
    assert format_price(12345) == "₹123.45"
    assert format_price(50000) == "₹500.00"
    assert format_price(5) == "₹0.05"


def test_rupee_paise_conversion():
    assert rupees_to_paise(123.45) == 12345
    assert rupees_to_paise("0.005") == 1
    assert paise_to_rupees(12345) == Decimal("123.45")


def test_cart_totals_endpoint(client):
    response = client.post("/cart/totals", json={"items": [{"unit_price": 30000, "quantity": 1}]})
    assert response.status_code == 200
    data = response.json()
    assert data["totals"] == {"subtotal": 30000, "shipping": 5000, "discount": 0, "total": 35000}
    assert data["formatted_total"] == "₹350.00"
    assert data["coupon_code"] is None


def test_cart_totals_rejects_negative_price(client):
    response = client.post("/cart/totals", json={"items": [{"unit_price": -1, "quantity": 1}]})
    assert response.status_code == 422
