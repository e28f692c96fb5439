# backend/utils/pos_writer.py
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, NamedTuple, Optional

from sqlalchemy.orm import Session

from models.product import PosProduct
from models.adjustment import StockAdjustment
from models.purchase import PosPurchase, PurchaseStatus
from models.sale import PosSale, PaymentMethod
from utils.cart import SaleCart
from utils.invoice_numbers import ReservedInvoice, reserve_invoice_number

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_NAME = "Walk-in Customer"

ADJUSTMENT_REASONS = (
    "Stock Count Correction",
    "Damaged Goods",
    "Theft/Loss",
    "Expired Products",
    "Returned Items",
    "Supplier Error",
    "System Error",
    "Transfer In",
    "Transfer Out",
    "Other",
)


class PosValidationError(ValueError):
    """Input rejected before anything was written."""


class InsufficientStockError(ValueError):
    def __init__(self, product_name: str, requested: int, available: int):
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(f"Only {available} {product_name} available in stock, {requested} requested")


class CommitResult(NamedTuple):
    record: object
    invoice: ReservedInvoice


@dataclass
class PurchaseLine:
    product_id: int
    quantity: int
    purchase_price: float


@dataclass
class AdjustmentLine:
    product_id: int
    adjustment_type: str  # "increase" or "decrease"
    quantity: int


def walk_in_customer_id(now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"customer-{now_ms}-{uuid.uuid4().hex[:9]}"


def _lock_products(db: Session, admin_id: int, product_ids: Iterable[int]) -> Dict[int, PosProduct]:
    # Row locks on PostgreSQL; SQLite serialises writers on the database instead
    rows = db.query(PosProduct).filter(
        PosProduct.admin_id == admin_id, PosProduct.id.in_(list(product_ids))
    ).with_for_update().all()
    return {p.id: p for p in rows}


def _restock(product: PosProduct, quantity: int, price: float, now: datetime) -> None:
    product.stock_qty += quantity
    if product.purchase_price != price:
        product.purchase_price = price
    product.updated_at = now


def commit_sale(
    db: Session,
    *,
    admin_id: int,
    cart: SaleCart,
    customer_name: str = DEFAULT_CUSTOMER_NAME,
    payment_method: str = PaymentMethod.CASH.value,
    notes: str = "",
    customer_id: Optional[str] = None,
) -> CommitResult:
    """
    Record a sale and take its items out of stock in one transaction.

    The invoice number is reserved first. Stock is then re-read under lock and
    every line must still fit; otherwise nothing is written and
    InsufficientStockError is raised. The sale row and all decrements commit
    together or not at all.
    """
    if not admin_id:
        raise PosValidationError("Authentication required. Please log in again.")
    if cart.is_empty:
        raise PosValidationError("Please add at least one product to the sale")
    try:
        method = PaymentMethod(payment_method).value
    except ValueError:
        raise PosValidationError(f"Unsupported payment method: {payment_method}")

    invoice = reserve_invoice_number(db, admin_id, "sale")
    now = datetime.now(timezone.utc)
    totals = cart.totals()

    try:
        products = _lock_products(db, admin_id, [line.product_id for line in cart.lines])
        for line in cart.lines:
            product = products.get(line.product_id)
            if product is None:
                raise PosValidationError(f"Product {line.product_name or line.product_id} no longer exists")
            if product.stock_qty < line.quantity:
                raise InsufficientStockError(product.name, line.quantity, product.stock_qty)
            product.stock_qty -= line.quantity
            product.updated_at = now

        sale = PosSale(
            admin_id=admin_id,
            customer_name=(customer_name or "").strip() or DEFAULT_CUSTOMER_NAME,
            customer_id=customer_id or walk_in_customer_id(),
            invoice_number=invoice.number,
            payment_method=method,
            items=[
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "product_sku": line.product_sku,
                    "sell_price": line.sell_price,
                    "quantity": line.quantity,
                    "total_amount": line.total_amount,
                }
                for line in cart.lines
            ],
            total_items=totals["total_items"],
            total_quantity=totals["total_quantity"],
            total_amount=totals["total_amount"],
            notes=(notes or "").strip(),
            sale_date=now,
            created_at=now,
            updated_at=now,
        )
        db.add(sale)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sale)
    logger.info("Sale %s committed for admin %s (%s lines, total %.2f)",
                sale.invoice_number, admin_id, sale.total_items, sale.total_amount)
    return CommitResult(sale, invoice)


def commit_purchase(
    db: Session,
    *,
    admin_id: int,
    supplier_name: str,
    lines: List[PurchaseLine],
    status: str = PurchaseStatus.RECEIVED.value,
    notes: str = "",
) -> CommitResult:
    """Record a supplier purchase; received purchases add to stock and update purchase prices."""
    if not admin_id:
        raise PosValidationError("Authentication required. Please log in again.")
    if not (supplier_name or "").strip():
        raise PosValidationError("Please select a supplier")
    if not lines:
        raise PosValidationError("Please add at least one product to the purchase")
    try:
        status = PurchaseStatus(status).value
    except ValueError:
        raise PosValidationError(f"Unsupported purchase status: {status}")
    for line in lines:
        if line.quantity < 1:
            raise PosValidationError("Quantity must be at least 1")
        if line.purchase_price < 0:
            raise PosValidationError("Price cannot be negative")

    invoice = reserve_invoice_number(db, admin_id, "purchase")
    now = datetime.now(timezone.utc)
    received = status == PurchaseStatus.RECEIVED.value

    try:
        products = _lock_products(db, admin_id, [line.product_id for line in lines])
        items = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                raise PosValidationError(f"Product {line.product_id} not found")
            price = round(float(line.purchase_price), 2)
            items.append({
                "product_id": product.id,
                "product_name": product.name,
                "product_sku": product.sku,
                "purchase_price": price,
                "quantity": line.quantity,
                "total_amount": round(price * line.quantity, 2),
            })
            if received:
                _restock(product, line.quantity, price, now)

        purchase = PosPurchase(
            admin_id=admin_id,
            supplier_name=supplier_name.strip(),
            invoice_number=invoice.number,
            status=status,
            items=items,
            total_items=len(items),
            total_quantity=sum(it["quantity"] for it in items),
            total_amount=round(sum(it["total_amount"] for it in items), 2),
            notes=(notes or "").strip(),
            purchase_date=now,
            received_date=now if received else None,
            created_at=now,
            updated_at=now,
        )
        db.add(purchase)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(purchase)
    logger.info("Purchase %s committed for admin %s (%s)", purchase.invoice_number, admin_id, status)
    return CommitResult(purchase, invoice)


def receive_purchase(db: Session, *, admin_id: int, purchase_id: int) -> PosPurchase:
    """Mark a pending purchase as received and add its items to stock."""
    purchase = db.query(PosPurchase).filter(
        PosPurchase.admin_id == admin_id, PosPurchase.id == purchase_id
    ).with_for_update().first()
    if purchase is None:
        raise LookupError(f"Purchase {purchase_id} not found")
    if purchase.status == PurchaseStatus.RECEIVED.value:
        raise PosValidationError(f"Purchase {purchase.invoice_number} has already been received")

    now = datetime.now(timezone.utc)
    try:
        # Conditional flip; a concurrent receive of the same purchase matches no row
        flipped = db.query(PosPurchase).filter(
            PosPurchase.id == purchase.id, PosPurchase.status == PurchaseStatus.PENDING.value
        ).update(
            {"status": PurchaseStatus.RECEIVED.value, "received_date": now, "updated_at": now},
            synchronize_session=False,
        )
        if flipped != 1:
            raise PosValidationError(f"Purchase {purchase.invoice_number} has already been received")

        products = _lock_products(db, admin_id, [it["product_id"] for it in purchase.items])
        for it in purchase.items:
            product = products.get(it["product_id"])
            if product is None:
                raise PosValidationError(f"Product {it['product_name']} no longer exists")
            _restock(product, int(it["quantity"]), float(it["purchase_price"]), now)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(purchase)
    logger.info("Purchase %s received for admin %s", purchase.invoice_number, admin_id)
    return purchase


def commit_adjustment(
    db: Session,
    *,
    admin_id: int,
    lines: List[AdjustmentLine],
    reason: str,
    notes: str = "",
    user_id: Optional[int] = None,
) -> CommitResult:
    """
    Correct stock levels by hand. Decreases are checked against the locked
    stock row like a sale; no product can end up below zero. All lines are
    applied together or not at all.
    """
    if not admin_id:
        raise PosValidationError("Authentication required. Please log in again.")
    if not lines:
        raise PosValidationError("Please add at least one product to the adjustment")
    if reason not in ADJUSTMENT_REASONS:
        raise PosValidationError("Please select a reason for this adjustment")
    seen = set()
    for line in lines:
        if line.product_id in seen:
            raise PosValidationError("Product already added to this adjustment")
        seen.add(line.product_id)
        if line.adjustment_type not in ("increase", "decrease"):
            raise PosValidationError(f"Please select adjustment type for product {line.product_id}")
        if line.quantity < 1:
            raise PosValidationError(f"Invalid adjustment quantity for product {line.product_id}")

    invoice = reserve_invoice_number(db, admin_id, "adjustment")
    now = datetime.now(timezone.utc)

    try:
        products = _lock_products(db, admin_id, [line.product_id for line in lines])
        items = []
        for line in lines:
            product = products.get(line.product_id)
            if product is None:
                raise PosValidationError(f"Product {line.product_id} not found")
            previous = product.stock_qty
            if line.adjustment_type == "decrease":
                if previous < line.quantity:
                    raise InsufficientStockError(product.name, line.quantity, previous)
                product.stock_qty = previous - line.quantity
            else:
                product.stock_qty = previous + line.quantity
            product.updated_at = now
            items.append({
                "product_id": product.id,
                "product_name": product.name,
                "product_sku": product.sku,
                "adjustment_type": line.adjustment_type,
                "quantity": line.quantity,
                "previous_stock": previous,
                "new_stock": product.stock_qty,
            })

        adjustment = StockAdjustment(
            admin_id=admin_id,
            user_id=user_id,
            adjustment_number=invoice.number,
            reason=reason,
            notes=(notes or "").strip(),
            items=items,
            total_items=len(items),
            total_increase=sum(it["quantity"] for it in items if it["adjustment_type"] == "increase"),
            total_decrease=sum(it["quantity"] for it in items if it["adjustment_type"] == "decrease"),
            created_at=now,
        )
        db.add(adjustment)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(adjustment)
    logger.info("Stock adjustment %s committed for admin %s (%s lines)",
                adjustment.adjustment_number, admin_id, adjustment.total_items)
    return CommitResult(adjustment, invoice)
