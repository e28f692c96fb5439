# tests/test_pos_writer.py
import pytest
from sqlalchemy.exc import OperationalError

from conftest import create_product, create_user, set_counter
from models.adjustment import StockAdjustment
from models.counter import InvoiceCounter
from models.product import PosProduct
from models.purchase import PosPurchase
from models.sale import PosSale
from utils.cart import SaleCart
from utils.invoice_numbers import current_count
from utils.pos_writer import (
    AdjustmentLine,
    InsufficientStockError,
    PosValidationError,
    PurchaseLine,
    commit_adjustment,
    commit_purchase,
    commit_sale,
    receive_purchase,
)


def _cart(*entries):
    """entries: (product row, quantity)"""
    cart = SaleCart()
    for product, qty in entries:
        line = cart.add_product(product)
        if qty > 1:
            cart.update_line(line.id, "quantity", qty)
    return cart


def _stock(db, product_id):
    return db.query(PosProduct.stock_qty).filter(PosProduct.id == product_id).scalar()


def test_sale_scenario_writes_sale_and_decrements_each_line(db, admin):
    a = create_product(db, admin.id, "A", sell_price=10.00, stock_qty=6)
    b = create_product(db, admin.id, "B", sell_price=5.00, stock_qty=4)
    set_counter(db, admin.id, "sale", 7)
    cart = _cart((a, 2), (b, 1))

    result = commit_sale(db, admin_id=admin.id, cart=cart, payment_method="Card", notes="  gift wrap ")
    sale = result.record

    assert sale.invoice_number == "S08"
    assert current_count(db, admin.id, "sale") == 8
    assert sale.total_amount == 25.00
    assert (sale.total_items, sale.total_quantity) == (2, 3)
    assert sale.payment_method == "Card"
    assert sale.notes == "gift wrap"
    assert sale.customer_name == "Walk-in Customer"
    assert sale.customer_id.startswith("customer-")
    assert len(sale.items) == len(cart.lines)
    assert _stock(db, a.id) == 4
    assert _stock(db, b.id) == 3
    assert db.query(PosSale).count() == 1


def test_sale_items_are_a_snapshot(db, admin):
    a = create_product(db, admin.id, "A", sell_price=10.00, stock_qty=6)
    cart = _cart((a, 1))
    cart.update_line(cart.lines[0].id, "sell_price", 8.0)

    sale = commit_sale(db, admin_id=admin.id, cart=cart).record

    db.query(PosProduct).filter(PosProduct.id == a.id).update({"sell_price": 99.0, "name": "Renamed"})
    db.commit()
    db.refresh(sale)
    assert sale.items == [{
        "product_id": a.id, "product_name": "Product A", "product_sku": "A",
        "sell_price": 8.0, "quantity": 1, "total_amount": 8.0,
    }]


def test_empty_cart_fails_before_any_write(db, admin):
    with pytest.raises(PosValidationError, match="at least one product"):
        commit_sale(db, admin_id=admin.id, cart=SaleCart())

    assert db.query(InvoiceCounter).count() == 0
    assert db.query(PosSale).count() == 0


def test_missing_tenant_fails_before_any_write(db, admin):
    a = create_product(db, admin.id, "A")
    with pytest.raises(PosValidationError, match="Authentication required"):
        commit_sale(db, admin_id=None, cart=_cart((a, 1)))

    assert db.query(InvoiceCounter).count() == 0
    assert _stock(db, a.id) == 5


def test_unknown_payment_method_is_rejected(db, admin):
    a = create_product(db, admin.id, "A")
    with pytest.raises(PosValidationError):
        commit_sale(db, admin_id=admin.id, cart=_cart((a, 1)), payment_method="Bitcoin")


def test_failed_commit_persists_nothing(db, admin, monkeypatch):
    a = create_product(db, admin.id, "A", stock_qty=6)
    b = create_product(db, admin.id, "B", stock_qty=4)
    cart = _cart((a, 2), (b, 1))

    real_commit = db.commit
    calls = {"n": 0}

    def flaky_commit():
        calls["n"] += 1
        # first commit is the invoice reservation, the second is the sale batch
        if calls["n"] == 2:
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))
        return real_commit()

    with monkeypatch.context() as m:
        m.setattr(db, "commit", flaky_commit)
        with pytest.raises(OperationalError):
            commit_sale(db, admin_id=admin.id, cart=cart)

    assert db.query(PosSale).count() == 0
    assert _stock(db, a.id) == 6
    assert _stock(db, b.id) == 4


def test_stock_is_rechecked_at_commit_time(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=6)
    b = create_product(db, admin.id, "B", stock_qty=3)
    cart = _cart((a, 2), (b, 2))

    # Someone else sells two B in between
    db.query(PosProduct).filter(PosProduct.id == b.id).update({"stock_qty": 1})
    db.commit()

    with pytest.raises(InsufficientStockError) as exc:
        commit_sale(db, admin_id=admin.id, cart=cart)

    assert exc.value.available == 1
    assert exc.value.requested == 2
    assert db.query(PosSale).count() == 0
    assert _stock(db, a.id) == 6
    assert _stock(db, b.id) == 1


def test_two_carts_from_same_snapshot_cannot_oversell(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=3)
    first = _cart((a, 2))
    second = _cart((a, 2))

    commit_sale(db, admin_id=admin.id, cart=first)
    with pytest.raises(InsufficientStockError):
        commit_sale(db, admin_id=admin.id, cart=second)

    assert _stock(db, a.id) == 1
    assert db.query(PosSale).count() == 1


def test_products_of_other_tenants_cannot_be_sold(db, admin):
    other = create_user(db, "rival@acme-shop.com")
    foreign = create_product(db, other.id, "A")

    with pytest.raises(PosValidationError, match="no longer exists"):
        commit_sale(db, admin_id=admin.id, cart=_cart((foreign, 1)))
    assert _stock(db, foreign.id) == 5


def test_selected_customer_reference_is_kept(db, admin):
    a = create_product(db, admin.id, "A")
    sale = commit_sale(db, admin_id=admin.id, cart=_cart((a, 1)),
                       customer_name="Sipho Dlamini", customer_id="42").record

    assert (sale.customer_name, sale.customer_id) == ("Sipho Dlamini", "42")


def test_received_purchase_adds_stock_and_updates_price(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=2, purchase_price=4.0)
    result = commit_purchase(
        db, admin_id=admin.id, supplier_name="Makro",
        lines=[PurchaseLine(a.id, 10, 3.5)],
    )
    purchase = result.record

    assert purchase.invoice_number == "P01"
    assert purchase.total_amount == 35.0
    assert purchase.received_date is not None
    assert _stock(db, a.id) == 12
    assert db.query(PosProduct.purchase_price).filter(PosProduct.id == a.id).scalar() == 3.5


def test_pending_purchase_leaves_stock_alone(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=2)
    purchase = commit_purchase(
        db, admin_id=admin.id, supplier_name="Makro", status="pending",
        lines=[PurchaseLine(a.id, 10, 3.5)],
    ).record

    assert purchase.status == "pending"
    assert purchase.received_date is None
    assert _stock(db, a.id) == 2
    assert db.query(PosPurchase).count() == 1


def test_purchase_needs_supplier(db, admin):
    a = create_product(db, admin.id, "A")
    with pytest.raises(PosValidationError, match="supplier"):
        commit_purchase(db, admin_id=admin.id, supplier_name=" ", lines=[PurchaseLine(a.id, 1, 1.0)])


def test_receiving_pending_purchase_adds_stock_once(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=2, purchase_price=4.0)
    b = create_product(db, admin.id, "B", stock_qty=0)
    pending = commit_purchase(
        db, admin_id=admin.id, supplier_name="Makro", status="pending",
        lines=[PurchaseLine(a.id, 10, 3.5), PurchaseLine(b.id, 3, 2.0)],
    ).record

    received = receive_purchase(db, admin_id=admin.id, purchase_id=pending.id)

    assert received.status == "received"
    assert received.received_date is not None
    assert _stock(db, a.id) == 12
    assert _stock(db, b.id) == 3
    assert db.query(PosProduct.purchase_price).filter(PosProduct.id == a.id).scalar() == 3.5

    with pytest.raises(PosValidationError, match="already been received"):
        receive_purchase(db, admin_id=admin.id, purchase_id=pending.id)
    assert _stock(db, a.id) == 12


def test_received_purchase_cannot_be_received_again(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=2)
    purchase = commit_purchase(db, admin_id=admin.id, supplier_name="Makro",
                               lines=[PurchaseLine(a.id, 1, 1.0)]).record

    with pytest.raises(PosValidationError):
        receive_purchase(db, admin_id=admin.id, purchase_id=purchase.id)
    assert _stock(db, a.id) == 3


def test_receiving_another_tenants_purchase(db, admin):
    rival = create_user(db, "rival@acme-shop.com")
    theirs = create_product(db, rival.id, "A")
    pending = commit_purchase(db, admin_id=rival.id, supplier_name="Makro", status="pending",
                              lines=[PurchaseLine(theirs.id, 1, 1.0)]).record

    with pytest.raises(LookupError):
        receive_purchase(db, admin_id=admin.id, purchase_id=pending.id)
    assert _stock(db, theirs.id) == 5


def test_adjustment_moves_stock_both_ways(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=5)
    b = create_product(db, admin.id, "B", stock_qty=0)

    result = commit_adjustment(
        db, admin_id=admin.id, reason="Stock Count Correction", user_id=admin.id,
        lines=[AdjustmentLine(a.id, "decrease", 5), AdjustmentLine(b.id, "increase", 7)],
    )
    adjustment = result.record

    assert adjustment.adjustment_number == "AD01"
    assert (adjustment.total_increase, adjustment.total_decrease) == (7, 5)
    assert adjustment.items[0]["previous_stock"] == 5
    assert adjustment.items[0]["new_stock"] == 0
    assert _stock(db, a.id) == 0
    assert _stock(db, b.id) == 7


def test_adjustment_below_zero_changes_nothing(db, admin):
    a = create_product(db, admin.id, "A", stock_qty=5)
    b = create_product(db, admin.id, "B", stock_qty=1)

    with pytest.raises(InsufficientStockError) as exc:
        commit_adjustment(
            db, admin_id=admin.id, reason="Theft/Loss",
            lines=[AdjustmentLine(a.id, "increase", 3), AdjustmentLine(b.id, "decrease", 2)],
        )

    assert exc.value.available == 1
    assert _stock(db, a.id) == 5
    assert _stock(db, b.id) == 1
    assert db.query(StockAdjustment).count() == 0


@pytest.mark.parametrize("reason, lines, message", [
    ("Whatever", [AdjustmentLine(1, "increase", 1)], "reason"),
    ("Other", [], "at least one product"),
    ("Other", [AdjustmentLine(1, "increase", 1), AdjustmentLine(1, "decrease", 1)], "already added"),
    ("Other", [AdjustmentLine(1, "sideways", 1)], "adjustment type"),
    ("Other", [AdjustmentLine(1, "increase", 0)], "Invalid adjustment quantity"),
])
def test_adjustment_validation(db, admin, reason, lines, message):
    with pytest.raises(PosValidationError, match=message):
        commit_adjustment(db, admin_id=admin.id, reason=reason, lines=lines)
    assert db.query(InvoiceCounter).count() == 0
