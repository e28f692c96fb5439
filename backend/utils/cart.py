# backend/utils/cart.py
"""
In-memory cart behind the point-of-sale form.

The cart is never stored: the client carries its lines between requests and
every operation rebuilds a SaleCart, applies one change and hands the lines
back. Each line remembers the stock level seen when the product was added, and
no line may ask for more than that.
"""
import math
import uuid
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional


class CartError(ValueError):
    """A cart operation was rejected; the cart is left as it was."""


def _money(value) -> float:
    amount = float(value)
    if not math.isfinite(amount):
        raise CartError("Price must be a finite number")
    return round(amount, 2)


@dataclass
class CartLine:
    id: str
    product_id: int
    product_name: str
    product_sku: str
    sell_price: float
    quantity: int
    total_amount: float
    current_stock_qty: int
    product_barcode: Optional[str] = None

    def recompute(self) -> None:
        self.total_amount = _money(self.quantity * self.sell_price)


class SaleCart:
    EDITABLE_FIELDS = ("quantity", "sell_price")

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self.lines: List[CartLine] = list(lines or [])

    @classmethod
    def from_lines(cls, raw_lines: Iterable[Any]) -> "SaleCart":
        """Rebuild a cart from client-held lines, re-checking every ceiling."""
        cart = cls()
        seen_ids, seen_products = set(), set()
        for raw in raw_lines:
            data = raw if isinstance(raw, dict) else raw.model_dump()
            line = CartLine(
                id=str(data.get("id") or uuid.uuid4().hex),
                product_id=int(data["product_id"]),
                product_name=data.get("product_name") or "",
                product_sku=data.get("product_sku") or "",
                product_barcode=data.get("product_barcode"),
                sell_price=_money(data["sell_price"]),
                quantity=cls._check_quantity(data["quantity"]),
                total_amount=0.0,
                current_stock_qty=int(data["current_stock_qty"]),
            )
            if line.id in seen_ids:
                raise CartError(f"Duplicate cart line {line.id}")
            if line.product_id in seen_products:
                raise CartError(f"{line.product_name or line.product_id} appears twice in the cart")
            if line.sell_price < 0:
                raise CartError("Price cannot be negative")
            if line.quantity > line.current_stock_qty:
                raise CartError(f"Only {line.current_stock_qty} {line.product_name} available in stock")
            line.recompute()
            seen_ids.add(line.id)
            seen_products.add(line.product_id)
            cart.lines.append(line)
        return cart

    @staticmethod
    def _check_quantity(value) -> int:
        number = float(value)
        if not math.isfinite(number) or number != int(number):
            raise CartError("Quantity must be a whole number")
        qty = int(number)
        if qty < 1:
            raise CartError("Quantity must be at least 1")
        return qty

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_line(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.id == line_id), None)

    def line_for_product(self, product_id: int) -> Optional[CartLine]:
        return next((line for line in self.lines if line.product_id == product_id), None)

    def add_product(self, product) -> CartLine:
        """
        Add one unit of a product.

        `product` needs id, name, sku, sell_price and stock_qty (a PosProduct
        row works). Re-adding a product bumps its existing line.
        """
        if product.stock_qty <= 0:
            raise CartError(f"{product.name} is out of stock")

        existing = self.line_for_product(product.id)
        if existing:
            if existing.quantity >= product.stock_qty:
                raise CartError(f"Cannot add more {product.name}. Only {product.stock_qty} in stock")
            existing.current_stock_qty = product.stock_qty
            existing.quantity += 1
            existing.recompute()
            return existing

        line = CartLine(
            id=uuid.uuid4().hex,
            product_id=product.id,
            product_name=product.name,
            product_sku=product.sku,
            product_barcode=getattr(product, "barcode", None),
            sell_price=_money(product.sell_price),
            quantity=1,
            total_amount=_money(product.sell_price),
            current_stock_qty=product.stock_qty,
        )
        self.lines.append(line)
        return line

    def update_line(self, line_id: str, field: str, value) -> CartLine:
        if field not in self.EDITABLE_FIELDS:
            raise CartError(f"Field '{field}' cannot be edited")
        line = self.find_line(line_id)
        if line is None:
            raise CartError("Cart line not found")

        if field == "quantity":
            qty = self._check_quantity(value)
            if qty > line.current_stock_qty:
                raise CartError(f"Only {line.current_stock_qty} {line.product_name} available in stock")
            line.quantity = qty
        else:
            price = _money(value)
            if price < 0:
                raise CartError("Price cannot be negative")
            line.sell_price = price

        line.recompute()
        return line

    def remove_line(self, line_id: str) -> None:
        self.lines = [line for line in self.lines if line.id != line_id]

    def clear(self) -> None:
        self.lines = []

    def totals(self) -> Dict[str, Any]:
        return {
            "total_items": len(self.lines),
            "total_quantity": sum(line.quantity for line in self.lines),
            "total_amount": _money(sum(line.total_amount for line in self.lines)),
        }

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [asdict(line) for line in self.lines]
