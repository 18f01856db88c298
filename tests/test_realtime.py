import pytest

from app.core.security import Guest
from app.realtime.notifier import SocketNotifier
from app.realtime.rooms import RoomManager, outlet_room, user_room
from app.services.order_service import create_order, update_payment_status
from tests.conftest import line


class FakeSocket:
    def __init__(self, broken=False):
        self.frames = []
        self.broken = broken

    async def send_json(self, data):
        if self.broken:
            raise RuntimeError("socket closed")
        self.frames.append(data)


@pytest.fixture
def rooms():
    return RoomManager()


def test_join_leave_and_unregister(rooms):
    socket_id = rooms.register(FakeSocket())
    rooms.join(socket_id, "outlet-1")
    rooms.join(socket_id, "user-1")
    assert rooms.rooms_of(socket_id) == {"outlet-1", "user-1"}

    rooms.leave(socket_id, "outlet-1")
    assert rooms.members("outlet-1") == set()

    rooms.unregister(socket_id)
    assert rooms.rooms_of(socket_id) == set()
    assert rooms.connection_count == 0


def test_join_requires_registered_connection(rooms):
    with pytest.raises(KeyError):
        rooms.join("never-registered", "outlet-1")


@pytest.mark.asyncio
async def test_emit_reaches_only_room_members(rooms):
    inside, outside = FakeSocket(), FakeSocket()
    inside_id = rooms.register(inside)
    outside_id = rooms.register(outside)
    rooms.join(inside_id, "outlet-1")
    rooms.join(outside_id, "outlet-2")

    delivered = await rooms.emit("outlet-1", "new-order", {"id": "o1"})

    assert delivered == 1
    assert inside.frames == [{"event": "new-order", "data": {"id": "o1"}}]
    assert outside.frames == []
    assert await rooms.emit("empty-room", "new-order", {}) == 0


@pytest.mark.asyncio
async def test_broken_socket_is_dropped(rooms):
    healthy, broken = FakeSocket(), FakeSocket(broken=True)
    healthy_id, broken_id = rooms.register(healthy), rooms.register(broken)
    for socket_id in (healthy_id, broken_id):
        rooms.join(socket_id, "outlet-1")

    delivered = await rooms.emit("outlet-1", "order-updated", {})

    assert delivered == 1
    assert rooms.members("outlet-1") == {healthy_id}
    assert rooms.connection_count == 1


@pytest.mark.asyncio
async def test_vendor_socket_sees_placement_and_payment(world, rooms):
    notifier = SocketNotifier(rooms)
    vendor, other_vendor, customer = FakeSocket(), FakeSocket(), FakeSocket()
    rooms.join(rooms.register(vendor), outlet_room(world.outlet.id))
    rooms.join(rooms.register(other_vendor), outlet_room(world.second_outlet.id))
    rooms.join(rooms.register(customer), user_room(world.customer.user_id))

    order = await create_order(
        world.customer,
        items=[line(world.outlet.id)],
        total_price=120,
        delivery_address=None,
        payment_method="upi",
        order_type="dine_in",
        customer_info=None,
        notifier=notifier,
    )
    await update_payment_status(order.id, "paid", notifier)

    # Placement and the paid re-announcement both arrive as new-order
    assert [f["event"] for f in vendor.frames] == ["new-order", "payment-updated", "new-order"]
    assert {f["data"]["id"] for f in vendor.frames} == {str(order.id)}
    assert vendor.frames[-1]["data"]["status"] == "confirmed"

    assert [f["event"] for f in customer.frames] == ["order-created", "payment-updated"]
    assert other_vendor.frames == []


@pytest.mark.asyncio
async def test_guest_order_with_nobody_listening(world, rooms):
    order = await create_order(
        Guest(),
        items=[line(world.outlet.id)],
        total_price=120,
        delivery_address=None,
        payment_method="cash",
        order_type="takeaway",
        customer_info={"name": "Gita", "email": "gita@example.com", "phone": "99999"},
        notifier=SocketNotifier(rooms),
    )
    assert order.user_id is None
