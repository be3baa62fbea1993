"""Cart reconciliation, totals and checkout"""
from decimal import Decimal

import pytest

from exceptions import ValidationError
from models import CartItem, Order, OrderItem
from services.cart_manager import (
    CartManager, check_stock_available, compute_total, quantity_of
)


def test_compute_total_is_exact():
    items = [
        {"price": Decimal("9.99"), "quantity": 2},
        {"price": Decimal("3.50"), "quantity": 1},
    ]
    assert compute_total(items) == Decimal("23.48")


def test_compute_total_accepts_float_prices():
    assert compute_total([{"price": 0.1, "quantity": 3}]) == Decimal("0.30")


def test_compute_total_of_empty_cart_is_zero():
    assert compute_total([]) == Decimal("0.00")


def test_quantity_of_missing_medicine_is_zero():
    assert quantity_of([{"medicine_id": "a", "quantity": 2}], "b") == 0
    assert quantity_of([{"medicine_id": "a", "quantity": 2}], "a") == 2


def test_add_creates_row_with_quantity_one(store, ctx, medicine):
    item = CartManager(store).add_or_increment(ctx, medicine.id)
    assert item.quantity == 1
    assert item.user_id == ctx.user_id


def test_add_increments_existing_row(store, ctx, medicine):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id)
    manager.add_or_increment(ctx, medicine.id)
    item = manager.add_or_increment(ctx, medicine.id, 3)

    assert item.quantity == 5
    assert store.count(CartItem, CartItem.user_id == ctx.user_id) == 1


def test_add_keeps_users_apart(store, ctx, other_ctx, medicine):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id)
    item = manager.add_or_increment(other_ctx, medicine.id)
    assert item.quantity == 1
    assert store.count(CartItem) == 2


def test_add_out_of_stock_medicine_is_allowed(store, ctx, out_of_stock_medicine):
    item = CartManager(store).add_or_increment(ctx, out_of_stock_medicine.id)
    assert item.quantity == 1


def test_add_unknown_medicine_rejected(store, ctx):
    with pytest.raises(ValidationError):
        CartManager(store).add_or_increment(ctx, "no-such-medicine")


@pytest.mark.parametrize("delta", [0, -1, "2", True])
def test_add_rejects_bad_increment(store, ctx, medicine, delta):
    with pytest.raises(ValidationError):
        CartManager(store).add_or_increment(ctx, medicine.id, delta)


def test_reserve_hook_can_refuse(store, ctx, out_of_stock_medicine):
    manager = CartManager(store, reserve=check_stock_available)
    with pytest.raises(ValidationError, match="in stock"):
        manager.add_or_increment(ctx, out_of_stock_medicine.id)
    assert store.count(CartItem) == 0


def test_set_quantity_replaces_stored_value(store, ctx, medicine):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id, 4)
    item = manager.set_quantity(ctx, medicine.id, 2)
    assert item.quantity == 2


@pytest.mark.parametrize("quantity", [0, -3])
def test_set_quantity_zero_or_less_removes(store, ctx, medicine, quantity):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id)
    assert manager.set_quantity(ctx, medicine.id, quantity) is None
    assert manager.list_items(ctx) == []


def test_remove_absent_item_is_not_an_error(store, ctx, medicine):
    assert CartManager(store).set_quantity(ctx, medicine.id, 0) is None


def test_set_quantity_on_absent_row_changes_nothing(store, ctx, medicine):
    assert CartManager(store).set_quantity(ctx, medicine.id, 3) is None
    assert store.count(CartItem) == 0


def test_list_items_joins_medicine(store, ctx, medicine, cheap_medicine):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id, 2)
    manager.add_or_increment(ctx, cheap_medicine.id)

    lines = manager.list_items(ctx)
    assert {line.name for line in lines} == {"Paracetamol 500mg", "Cetirizine 10mg"}
    assert compute_total(lines) == Decimal("23.48")


def test_checkout_snapshots_cart_and_empties_it(store, ctx, medicine, cheap_medicine):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id, 2)
    manager.add_or_increment(ctx, cheap_medicine.id)

    order = manager.checkout(ctx, "12 Harbour Road")

    assert order.total_amount == Decimal("23.48")
    assert order.status == "pending"
    assert len(manager.order_items(order)) == 2
    assert manager.list_items(ctx) == []
    assert store.count(Order, Order.user_id == ctx.user_id) == 1
    assert store.count(OrderItem) == 2


def test_checkout_leaves_stock_alone(store, ctx, medicine):
    manager = CartManager(store)
    manager.add_or_increment(ctx, medicine.id, 3)
    manager.checkout(ctx)
    store.session.refresh(medicine)
    assert medicine.stock_quantity == 10


def test_checkout_empty_cart_rejected(store, ctx):
    with pytest.raises(ValidationError, match="empty"):
        CartManager(store).checkout(ctx)


def test_cart_endpoints(client, auth_headers, medicine, cheap_medicine):
    response = client.post("/api/cart/items", json={"medicine_id": medicine.id}, headers=auth_headers)
    assert response.status_code == 200
    client.post("/api/cart/items", json={"medicine_id": medicine.id}, headers=auth_headers)
    client.post("/api/cart/items", json={"medicine_id": cheap_medicine.id}, headers=auth_headers)

    cart = client.get("/api/cart", headers=auth_headers).json()
    assert cart["item_count"] == 2
    assert Decimal(cart["total"]) == Decimal("23.48")

    response = client.put(f"/api/cart/items/{cheap_medicine.id}", json={"quantity": 0}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["quantity"] == 0
    assert response.json()["item"] is None


def test_quantity_update_for_item_not_in_cart(client, auth_headers, medicine):
    response = client.put(f"/api/cart/items/{medicine.id}", json={"quantity": 3}, headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Item is not in your cart"
    assert client.get("/api/cart", headers=auth_headers).json()["item_count"] == 0

    notifications = client.get("/api/notifications", headers=auth_headers).json()
    assert [n["type"] for n in notifications] == ["error"]
    assert notifications[0]["message"] == "Item is not in your cart"


def test_checkout_endpoint(client, auth_headers, medicine):
    client.post("/api/cart/items", json={"medicine_id": medicine.id, "quantity": 2}, headers=auth_headers)

    response = client.post("/api/cart/checkout", json={}, headers=auth_headers)
    assert response.status_code == 201
    order = response.json()
    assert Decimal(order["total_amount"]) == Decimal("19.98")
    assert len(order["items"]) == 1

    orders = client.get("/api/orders", headers=auth_headers).json()
    assert [o["id"] for o in orders] == [order["id"]]
    assert client.get(f"/api/orders/{order['id']}", headers=auth_headers).status_code == 200


def test_checkout_endpoint_with_empty_cart(client, auth_headers):
    response = client.post("/api/cart/checkout", json={}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cart is empty"


def test_add_unknown_medicine_endpoint(client, auth_headers):
    response = client.post("/api/cart/items", json={"medicine_id": "missing"}, headers=auth_headers)
    assert response.status_code == 400
