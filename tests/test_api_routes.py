import pytest
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from app.core.config import PAYMENT_SERVICE_KEY
from app.core.errors import AccessDenied, ValidationFailed
from app.core.security import Customer, Guest, create_access_token
from app.main import app
from app.models.order import OrderStatus, OrderType, PaymentMethod, PaymentStatus
from app.realtime.rooms import outlet_room
from app.schemas.order import OrderOut, OrderVerifyResponse

CUSTOMER_ID = str(uuid4())


@pytest.fixture
def client():
    return TestClient(app)


def bearer(role="user", user_id=CUSTOMER_ID, **claims):
    token = create_access_token({"userId": user_id, "role": role, **claims})
    return {"Authorization": f"Bearer {token}"}


def sample_order(**overrides) -> OrderOut:
    now = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    data = dict(
        id=uuid4(),
        order_number="ORD-1714557600000-42",
        customer_info={"name": "Gita Guest", "email": "gita@example.com", "phone": "9999999999"},
        outlet_id=uuid4(),
        restaurant_id=uuid4(),
        items=[{"itemId": "item-1", "itemName": "Paneer Wrap", "itemPrice": 120.0, "quantity": 1}],
        total_price=120,
        delivery_address="",
        payment_method=PaymentMethod.CASH,
        order_type=OrderType.TAKEAWAY,
        status=OrderStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        version=0,
        created_at=now,
        updated_at=now,
    )
    data.update(overrides)
    return OrderOut(**data)


ORDER_BODY = {
    "items": [{
        "itemId": "item-1", "itemName": "Paneer Wrap", "itemPrice": 120, "quantity": 1,
        "outletId": str(uuid4()),
    }],
    "totalPrice": 120,
    "paymentMethod": "cash",
    "orderType": "takeaway",
    "customerInfo": {"name": "Gita Guest", "email": "gita@example.com", "phone": "9999999999"},
}


class TestOrderRoutes:
    def test_guest_create_order_returns_201(self, client):
        with patch('app.services.order_service.create_order', new_callable=AsyncMock) as mock_create:
            mock_create.return_value = sample_order()

            response = client.post("/api/v1/order/create", json=ORDER_BODY)

            assert response.status_code == 201
            body = response.json()
            assert body["success"] is True
            assert body["data"]["orderNumber"] == "ORD-1714557600000-42"
            assert body["data"]["paymentStatus"] == "pending"

            kwargs = mock_create.call_args.kwargs
            assert kwargs["principal"] == Guest()
            assert kwargs["items"][0]["itemId"] == "item-1"
            assert kwargs["customer_info"]["phone"] == "9999999999"
            assert kwargs["notifier"] is app.state.notifier

    def test_create_order_with_token_is_attributed(self, client):
        with patch('app.services.order_service.create_order', new_callable=AsyncMock) as mock_create:
            mock_create.return_value = sample_order(customer_info=None, user_id=CUSTOMER_ID)

            response = client.post("/api/v1/order/create", json=ORDER_BODY, headers=bearer())

            assert response.status_code == 201
            assert mock_create.call_args.kwargs["principal"] == Customer(CUSTOMER_ID)

    def test_create_order_validation_error_is_400(self, client):
        with patch('app.services.order_service.create_order', new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = ValidationFailed("Cart is empty")

            response = client.post("/api/v1/order/create", json={**ORDER_BODY, "items": []})

            assert response.status_code == 400
            body = response.json()
            assert body["success"] is False
            assert body["message"] == "Cart is empty"
            assert body["error"]["code"] == "validation_error"

    def test_bad_token_is_401_even_where_optional(self, client):
        response = client.post(
            "/api/v1/order/create", json=ORDER_BODY, headers={"Authorization": "Bearer garbage"}
        )
        assert response.status_code == 401

    def test_user_orders_require_token(self, client):
        response = client.get("/api/v1/order/user")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "authentication_error"

    def test_access_denied_is_403(self, client):
        with patch('app.services.order_service.get_outlet_orders', new_callable=AsyncMock) as mock_list:
            mock_list.side_effect = AccessDenied("Access denied")

            response = client.get(f"/api/v1/order/outlet/{uuid4()}?orderType=delivery", headers=bearer("manager"))

            assert response.status_code == 403
            assert mock_list.call_args.args[2] == "delivery"

    def test_status_update_passes_through(self, client):
        order = sample_order(status=OrderStatus.PREPARING, version=1)
        with patch('app.services.order_service.update_order_status', new_callable=AsyncMock) as mock_update:
            mock_update.return_value = order

            response = client.put(
                f"/api/v1/order/{order.id}/status", json={"status": "preparing"}, headers=bearer("owner")
            )

            assert response.status_code == 200
            assert response.json()["data"]["status"] == "preparing"
            assert mock_update.call_args.args[2] == "preparing"

    def test_payment_webhook_requires_service_key(self, client):
        with patch('app.services.order_service.update_payment_status', new_callable=AsyncMock) as mock_pay:
            response = client.put(f"/api/v1/order/{uuid4()}/payment", json={"paymentStatus": "paid"})
            assert response.status_code == 401

            response = client.put(
                f"/api/v1/order/{uuid4()}/payment",
                json={"paymentStatus": "paid"},
                headers={"X-Service-Key": "wrong"},
            )
            assert response.status_code == 401
            mock_pay.assert_not_called()

    def test_payment_webhook_with_service_key(self, client):
        order = sample_order(status=OrderStatus.CONFIRMED, payment_status=PaymentStatus.PAID, version=1)
        with patch('app.services.order_service.update_payment_status', new_callable=AsyncMock) as mock_pay:
            mock_pay.return_value = order

            response = client.put(
                f"/api/v1/order/{order.id}/payment",
                json={"paymentStatus": "paid"},
                headers={"X-Service-Key": PAYMENT_SERVICE_KEY},
            )

            assert response.status_code == 200
            assert response.json()["data"]["status"] == "confirmed"
            assert mock_pay.call_args.args[1] == "paid"

    def test_verify_uses_underscore_id(self, client):
        order_id = uuid4()
        with patch('app.services.order_service.verify_payment', new_callable=AsyncMock) as mock_verify:
            mock_verify.return_value = OrderVerifyResponse(
                id=order_id,
                order_number="ORD-1-1",
                payment_status=PaymentStatus.PAID,
                status=OrderStatus.CONFIRMED,
                total_price=120,
            )

            response = client.get(f"/api/v1/order/{order_id}/verify")

            assert response.status_code == 200
            data = response.json()["data"]
            assert data["_id"] == str(order_id)
            assert data["paymentStatus"] == "paid"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v1/nothing-here")
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestOtherRoutes:
    def test_guest_order_with_bad_email_is_422(self, client):
        body = {**ORDER_BODY, "customerInfo": {"name": "Gita", "email": "not-an-email", "phone": "99999"}}
        with patch('app.services.order_service.create_order', new_callable=AsyncMock) as mock_create:
            response = client.post("/api/v1/order/create", json=body)

            assert response.status_code == 422
            assert response.json()["error"]["code"] == "validation_error"
            mock_create.assert_not_called()

    def test_public_menu_page(self, client):
        outlet = SimpleNamespace(id=uuid4(), name="MG Road", location="MG Road")
        dish = SimpleNamespace(
            id=uuid4(), item_name="Veg Wrap", item_price=Decimal("99.00"), item_quantity=5, item_photo=None,
            item_description=None, category="Wraps", is_available=True, outlet_id=outlet.id,
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc), updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        with patch('app.services.menu_service.view_outlet_menu', new_callable=AsyncMock) as mock_view:
            mock_view.return_value = (outlet, [dish])

            response = client.get("/api/v1/item/view/Spice Route/MG Road")

            assert response.status_code == 200
            data = response.json()["data"]
            assert data["outlet"]["name"] == "MG Road"
            assert data["items"][0]["itemPrice"] == 99.0
            assert data["items"][0]["isAvailable"] is True
            mock_view.assert_awaited_once_with("Spice Route", "MG Road")

    def test_menu_item_create_requires_token(self, client):
        response = client.post("/api/v1/item/create", json={"outletId": str(uuid4()), "itemName": "Wrap", "itemPrice": 10})
        assert response.status_code == 401

    def test_restaurant_update_passes_only_sent_fields(self, client):
        restaurant = SimpleNamespace(
            id=uuid4(), name="Spice Route", owner_id=uuid4(), outlet_count=5, image=None,
            profile_photo_url=None, created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        with patch('app.services.outlet_service.update_restaurant', new_callable=AsyncMock) as mock_update:
            mock_update.return_value = restaurant

            response = client.put(f"/api/v1/restaurant/{restaurant.id}", json={"outletCount": 5}, headers=bearer("owner"))

            assert response.status_code == 200
            assert response.json()["data"]["outletCount"] == 5
            assert mock_update.call_args.args[2] == {"outlet_count": 5}

    def test_cart_requires_token(self, client):
        assert client.get("/api/v1/cart/").status_code == 401

    def test_cart_add_returns_camel_case_lines(self, client):
        cart = SimpleNamespace(
            id=uuid4(),
            user_id=uuid4(),
            items=[{"itemId": "i1", "itemName": "Lassi", "itemPrice": 60.0, "quantity": 2, "outletId": "o1"}],
            updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        with patch('app.services.cart_service.add_item', new_callable=AsyncMock) as mock_add:
            mock_add.return_value = cart

            response = client.post(
                "/api/v1/cart/add",
                json={"itemId": "i1", "itemName": "Lassi", "itemPrice": 60, "quantity": 2, "outletId": "o1"},
                headers=bearer(),
            )

            assert response.status_code == 200
            assert response.json()["data"]["items"][0]["itemName"] == "Lassi"
            assert mock_add.call_args.args[1]["outletId"] == "o1"

    def test_assign_manager_rejects_bad_email(self, client):
        response = client.post(
            f"/api/v1/outlet/{uuid4()}/managers", json={"managerEmail": "not-an-email"}, headers=bearer("owner")
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"

    def test_delete_account(self, client):
        with patch('app.services.outlet_service.delete_account', new_callable=AsyncMock) as mock_delete:
            response = client.delete("/api/v1/user/me", headers=bearer("owner"))

            assert response.status_code == 200
            mock_delete.assert_awaited_once()


class TestSocket:
    def test_join_and_leave_outlet_room(self, client):
        outlet_id = str(uuid4())
        room = outlet_room(outlet_id)

        with client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "join-outlet", "data": outlet_id})
            assert ws.receive_json() == {"event": "joined", "data": {"room": room}}
            assert len(app.state.rooms.members(room)) == 1

            ws.send_json({"event": "leave-outlet", "data": outlet_id})
            assert ws.receive_json() == {"event": "left", "data": {"room": room}}
            assert app.state.rooms.members(room) == set()

    def test_unknown_frame_gets_error(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "join-kitchen", "data": "x"})
            frame = ws.receive_json()
            assert frame["event"] == "error"

    def test_malformed_frames_keep_connection_open(self, client):
        outlet_id = str(uuid4())
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            assert ws.receive_json() == {"event": "error", "data": {"message": "Invalid frame"}}

            ws.send_bytes(b"\xff\xfe")
            assert ws.receive_json()["event"] == "error"

            ws.send_text('["join-outlet"]')
            assert ws.receive_json()["event"] == "error"

            # Same socket still serves joins
            ws.send_json({"event": "join-outlet", "data": outlet_id})
            assert ws.receive_json() == {"event": "joined", "data": {"room": outlet_room(outlet_id)}}
