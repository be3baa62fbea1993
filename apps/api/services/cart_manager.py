"""Cart reconciliation against the medicine catalog.

Two write paths with different semantics:

* ``add_or_increment`` adds ``delta`` to whatever is stored (the "Add to cart"
  action), via a single upsert keyed on (user, medicine).
* ``set_quantity`` replaces the stored quantity (the "adjust quantity"
  action); zero or less removes the row.

Neither path checks stock. A deployment that wants a stock guard installs a
``reserve(medicine, quantity)`` hook, or switches on the
ENFORCE_STOCK_RESERVATION rule to get :func:`check_stock_available`.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Iterable, List, Optional
import logging

from sqlmodel import select

from auth import SessionContext
from exceptions import ValidationError
from models import CartItem, Medicine, Order, OrderItem, OrderStatus, generate_id, utc_now
from store import Store
from validators.business_rules import get_business_rules

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

ReserveHook = Callable[[Medicine, int], None]


@dataclass
class CartLine:
    """A cart row joined with its medicine"""
    id: str
    medicine_id: str
    name: str
    category: Optional[str]
    price: Decimal
    quantity: int
    stock_quantity: int
    requires_prescription: bool


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item[name]
    return getattr(item, name)


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats like 9.99 keep their printed value
    return Decimal(str(value))


def compute_total(cart_items: Iterable[Any]) -> Decimal:
    """Sum of price x quantity, in exact decimal arithmetic"""
    total = sum(
        (_as_decimal(_field(item, "price")) * int(_field(item, "quantity")) for item in cart_items),
        Decimal("0"),
    )
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def quantity_of(cart_items: Iterable[Any], medicine_id: str) -> int:
    for item in cart_items:
        if _field(item, "medicine_id") == medicine_id:
            return int(_field(item, "quantity"))
    return 0


def check_stock_available(medicine: Medicine, quantity: int) -> None:
    """Reserve hook that refuses quantities above current stock"""
    if quantity > medicine.stock_quantity:
        raise ValidationError(
            f"Only {medicine.stock_quantity} of {medicine.name} in stock"
        )


def _validate_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    return value


class CartManager:
    def __init__(self, store: Store, reserve: Optional[ReserveHook] = None):
        self.store = store
        if reserve is None and get_business_rules().ENFORCE_STOCK_RESERVATION:
            reserve = check_stock_available
        self.reserve = reserve

    def _medicine(self, medicine_id: str) -> Medicine:
        if not medicine_id:
            raise ValidationError("Medicine is required")
        medicine = self.store.select_by_id(Medicine, medicine_id)
        if medicine is None:
            raise ValidationError("Medicine not found")
        return medicine

    def _item(self, ctx: SessionContext, medicine_id: str) -> Optional[CartItem]:
        rows = self.store.select_all(
            CartItem,
            CartItem.user_id == ctx.user_id,
            CartItem.medicine_id == medicine_id,
        )
        return rows[0] if rows else None

    def list_items(self, ctx: SessionContext) -> List[CartLine]:
        rows = self.store.select_rows(
            CartItem,
            select(CartItem, Medicine)
            .join(Medicine, CartItem.medicine_id == Medicine.id)
            .where(CartItem.user_id == ctx.user_id)
            .order_by(CartItem.created_at, CartItem.id),
        )
        return [
            CartLine(
                id=item.id,
                medicine_id=item.medicine_id,
                name=medicine.name,
                category=medicine.category,
                price=_as_decimal(medicine.price),
                quantity=item.quantity,
                stock_quantity=medicine.stock_quantity,
                requires_prescription=medicine.requires_prescription,
            )
            for item, medicine in rows
        ]

    def add_or_increment(self, ctx: SessionContext, medicine_id: str, delta: Optional[int] = None) -> CartItem:
        """Create the row with quantity=delta, or add delta to it. No stock check."""
        if delta is None:
            delta = get_business_rules().DEFAULT_CART_INCREMENT
        if _validate_int(delta, "Quantity increment") < 1:
            raise ValidationError("Quantity increment must be positive")

        medicine = self._medicine(medicine_id)
        if self.reserve is not None:
            current = self._item(ctx, medicine_id)
            self.reserve(medicine, (current.quantity if current else 0) + delta)

        self.store.upsert(
            CartItem,
            values={
                "id": generate_id(),
                "user_id": ctx.user_id,
                "medicine_id": medicine_id,
                "quantity": delta,
                "created_at": utc_now(),
            },
            conflict_keys=["user_id", "medicine_id"],
            update_set={"quantity": CartItem.__table__.c.quantity + delta},
        )
        item = self._item(ctx, medicine_id)
        logger.info(f"Cart of user {ctx.user_id}: {medicine.name} now x{item.quantity}")
        return item

    def set_quantity(self, ctx: SessionContext, medicine_id: str, quantity: int) -> Optional[CartItem]:
        """Absolute set. quantity <= 0 removes the row; removing an absent row is fine."""
        _validate_int(quantity, "Quantity")
        if not medicine_id:
            raise ValidationError("Medicine is required")

        filters = [CartItem.user_id == ctx.user_id, CartItem.medicine_id == medicine_id]
        if quantity <= 0:
            removed = self.store.delete_where(CartItem, filters)
            logger.info(f"Cart of user {ctx.user_id}: removed {medicine_id} ({removed} row)")
            return None

        if self.reserve is not None:
            self.reserve(self._medicine(medicine_id), quantity)

        changed = self.store.update_where(CartItem, filters, {"quantity": quantity})
        if not changed:
            return None
        logger.info(f"Cart of user {ctx.user_id}: {medicine_id} set to x{quantity}")
        return self._item(ctx, medicine_id)

    def checkout(self, ctx: SessionContext, shipping_address: Optional[str] = None) -> Order:
        """Snapshot the cart into an order at current prices and empty the cart.

        Stock is left untouched.
        """
        lines = self.list_items(ctx)
        if not lines:
            raise ValidationError("Cart is empty")

        order = self.store.insert(Order(
            user_id=ctx.user_id,
            total_amount=compute_total(lines),
            status=OrderStatus.PENDING.value,
            shipping_address=shipping_address,
        ))
        for line in lines:
            self.store.insert(OrderItem(
                order_id=order.id,
                medicine_id=line.medicine_id,
                quantity=line.quantity,
                price=line.price,
            ))
        self.store.delete_where(CartItem, [CartItem.user_id == ctx.user_id])

        logger.info(f"Order {order.id} placed by user {ctx.user_id} for {order.total_amount}")
        return order

    def list_orders(self, ctx: SessionContext) -> List[Order]:
        return self.store.select_all(
            Order,
            Order.user_id == ctx.user_id,
            order_by=[Order.created_at.desc()],
        )

    def order_items(self, order: Order) -> List[OrderItem]:
        return self.store.select_all(OrderItem, OrderItem.order_id == order.id)
