# tests/test_cart.py
import pytest

from conftest import stub_product
from utils.cart import CartError, SaleCart


def _cart_with(*entries):
    """entries: (product, quantity)"""
    cart = SaleCart()
    for product, qty in entries:
        line = cart.add_product(product)
        if qty > 1:
            cart.update_line(line.id, "quantity", qty)
    return cart


def test_totals_for_two_line_scenario():
    a = stub_product(1, sku="A", stock_qty=10, sell_price=10.00)
    b = stub_product(2, sku="B", stock_qty=10, sell_price=5.00)
    cart = _cart_with((a, 2), (b, 1))

    assert cart.totals() == {"total_items": 2, "total_quantity": 3, "total_amount": 25.00}


def test_total_amount_is_sum_of_quantity_times_price():
    products = [stub_product(i, sku=f"P{i}", stock_qty=20, sell_price=p)
                for i, p in enumerate([3.99, 12.5, 0.35, 100.0], start=1)]
    cart = _cart_with(*[(p, i + 2) for i, p in enumerate(products)])

    expected = round(sum(line.quantity * line.sell_price for line in cart.lines), 2)
    assert cart.totals()["total_amount"] == pytest.approx(expected)


def test_new_line_starts_at_one_unit():
    cart = SaleCart()
    line = cart.add_product(stub_product(7, sku="X", sell_price=42.0, stock_qty=3))

    assert line.quantity == 1
    assert line.total_amount == 42.0
    assert line.current_stock_qty == 3
    assert line.product_sku == "X"


def test_adding_same_product_merges_into_one_line():
    product = stub_product(1, stock_qty=3)
    cart = SaleCart()
    cart.add_product(product)
    cart.add_product(product)

    assert len(cart) == 1
    assert cart.lines[0].quantity == 2
    assert cart.lines[0].total_amount == 20.0


def test_adding_beyond_live_stock_is_rejected():
    product = stub_product(1, stock_qty=2)
    cart = SaleCart()
    cart.add_product(product)
    cart.add_product(product)

    with pytest.raises(CartError, match="Only 2 in stock"):
        cart.add_product(product)
    assert cart.lines[0].quantity == 2


def test_out_of_stock_product_is_rejected_and_cart_unchanged():
    cart = SaleCart()
    cart.add_product(stub_product(1, sku="A"))
    before = cart.to_dicts()

    with pytest.raises(CartError, match="out of stock"):
        cart.add_product(stub_product(2, sku="B", stock_qty=0))
    assert cart.to_dicts() == before


def test_quantity_above_stock_keeps_previous_quantity():
    cart = SaleCart()
    line = cart.add_product(stub_product(1, stock_qty=4))
    cart.update_line(line.id, "quantity", 3)

    with pytest.raises(CartError, match="Only 4"):
        cart.update_line(line.id, "quantity", 5)
    assert cart.lines[0].quantity == 3
    assert cart.lines[0].total_amount == 30.0


def test_price_change_recomputes_line_total():
    cart = SaleCart()
    line = cart.add_product(stub_product(1, stock_qty=4))
    cart.update_line(line.id, "quantity", 3)
    cart.update_line(line.id, "sell_price", 7.5)

    assert cart.lines[0].total_amount == 22.5


@pytest.mark.parametrize("field, value", [
    ("quantity", 0), ("quantity", 1.5), ("sell_price", -1), ("stock", 2),
    ("quantity", float("inf")), ("quantity", float("nan")),
    ("sell_price", float("inf")), ("sell_price", float("nan")),
])
def test_invalid_updates_are_rejected(field, value):
    cart = SaleCart()
    line = cart.add_product(stub_product(1, stock_qty=4))

    with pytest.raises(CartError):
        cart.update_line(line.id, field, value)
    assert cart.lines[0].quantity == 1
    assert cart.lines[0].sell_price == 10.0
    assert cart.totals()["total_amount"] == 10.0


def test_remove_line_is_unconditional():
    cart = SaleCart()
    keep = cart.add_product(stub_product(1, sku="A"))
    gone = cart.add_product(stub_product(2, sku="B"))

    cart.remove_line(gone.id)
    cart.remove_line("does-not-exist")

    assert [line.id for line in cart.lines] == [keep.id]


def test_from_lines_recomputes_totals_from_client_data():
    cart = SaleCart.from_lines([{
        "id": "l1", "product_id": 1, "product_name": "Kettle", "product_sku": "K1",
        "sell_price": 199.99, "quantity": 2, "total_amount": 1.0, "current_stock_qty": 5,
    }])

    assert cart.lines[0].total_amount == 399.98


def test_from_lines_rejects_quantity_over_snapshot_stock():
    with pytest.raises(CartError):
        SaleCart.from_lines([{
            "id": "l1", "product_id": 1, "product_name": "Kettle", "product_sku": "K1",
            "sell_price": 10, "quantity": 6, "current_stock_qty": 5,
        }])


def test_from_lines_rejects_duplicate_products():
    line = {"product_id": 1, "product_name": "Kettle", "sell_price": 10, "quantity": 1, "current_stock_qty": 5}
    with pytest.raises(CartError, match="twice"):
        SaleCart.from_lines([dict(line, id="a"), dict(line, id="b")])


def test_clear_empties_cart():
    cart = SaleCart()
    cart.add_product(stub_product(1))
    cart.clear()

    assert cart.is_empty
    assert cart.totals() == {"total_items": 0, "total_quantity": 0, "total_amount": 0.0}


def test_from_lines_rejects_infinite_price():
    with pytest.raises(CartError, match="finite"):
        SaleCart.from_lines([{
            "id": "l1", "product_id": 1, "product_name": "Kettle", "product_sku": "K1",
            "sell_price": float("inf"), "quantity": 1, "current_stock_qty": 5,
        }])
