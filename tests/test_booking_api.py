import asyncio
import pytest
from fastapi import HTTPException

from config.database import Database
from crud import booking_crud, user_crud
from conftest import auth_header

MONDAY = "2030-01-07"
SUNDAY = "2030-01-06"


@pytest.fixture
def shop_with_service(shop, client):
    token, _ = shop
    response = client.post("/api/shops/me/services", headers=auth_header(token), json={"name": "Haircut", "price": 150})
    assert response.status_code == 200
    return shop


@pytest.fixture
def booking(shop_with_service, customer, client):
    _, shop_uid = shop_with_service
    token, _ = customer
    response = client.post("/api/bookings/", headers=auth_header(token), json={
        "provider_id": shop_uid,
        "service_name": "haircut",
        "booking_date": MONDAY,
        "booking_time": "10:30 AM",
        "special_request": "  short on the sides  ",
    })
    assert response.status_code == 200, response.text
    return response.json()


def act(client, token, booking_id, action):
    return client.post(f"/api/bookings/{booking_id}/{action}", headers=auth_header(token))


def test_new_booking_is_pending(booking, customer):
    _, user_uid = customer
    assert booking["status"] == "pending"
    assert booking["user_id"] == user_uid
    assert booking["price"] == 150
    assert booking["booking_time"] == "10:30 AM"
    assert booking["special_request"] == "short on the sides"


def test_booking_on_off_day_is_rejected(shop_with_service, customer, client):
    _, shop_uid = shop_with_service
    token, _ = customer
    response = client.post("/api/bookings/", headers=auth_header(token), json={
        "provider_id": shop_uid, "service_name": "Haircut", "booking_date": SUNDAY, "booking_time": "10:30 AM"
    })
    assert response.status_code == 400
    assert "Sundays" in response.json()["detail"]


@pytest.mark.parametrize("booking_time", ["11:30 PM", "7am-ish"])
def test_booking_outside_hours_is_rejected(shop_with_service, customer, client, booking_time):
    _, shop_uid = shop_with_service
    token, _ = customer
    response = client.post("/api/bookings/", headers=auth_header(token), json={
        "provider_id": shop_uid, "service_name": "Haircut", "booking_date": MONDAY, "booking_time": booking_time
    })
    assert response.status_code == 400


def test_booking_unknown_service(shop_with_service, customer, client):
    _, shop_uid = shop_with_service
    token, _ = customer
    response = client.post("/api/bookings/", headers=auth_header(token), json={
        "provider_id": shop_uid, "service_name": "Manicure", "booking_date": MONDAY, "booking_time": "10:30 AM"
    })
    assert response.status_code == 400


def test_cannot_book_own_shop(shop_with_service, client):
    token, shop_uid = shop_with_service
    response = client.post("/api/bookings/", headers=auth_header(token), json={
        "provider_id": shop_uid, "service_name": "Haircut", "booking_date": MONDAY, "booking_time": "10:30 AM"
    })
    assert response.status_code == 400


def test_full_lifecycle(booking, shop, client):
    shop_token, _ = shop
    booking_id = booking["booking_id"]

    accepted = act(client, shop_token, booking_id, "accept")
    assert accepted.status_code == 200
    assert accepted.json()["status"] == "confirmed"
    assert accepted.json()["confirmed_at"] is not None

    completed = act(client, shop_token, booking_id, "complete")
    assert completed.json()["status"] == "completed"
    assert completed.json()["completed_at"] is not None

    for action in ("accept", "reject", "cancel", "complete"):
        assert act(client, shop_token, booking_id, action).status_code == 409


def test_customer_cannot_accept(booking, customer, client):
    token, _ = customer
    assert act(client, token, booking["booking_id"], "accept").status_code == 403


def test_customer_can_cancel_only_while_pending(booking, customer, shop, client):
    token, _ = customer
    cancelled = act(client, token, booking["booking_id"], "cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert act(client, shop[0], booking["booking_id"], "accept").status_code == 409


def test_stranger_cannot_touch_booking(booking, register, client):
    token, _ = register("stranger@example.com")
    assert client.get(f"/api/bookings/{booking['booking_id']}", headers=auth_header(token)).status_code == 403
    assert act(client, token, booking["booking_id"], "cancel").status_code == 403


def test_unknown_action_is_a_validation_error(booking, shop, client):
    assert act(client, shop[0], booking["booking_id"], "archive").status_code == 422


def test_status_endpoint_with_legacy_name(booking, shop, client):
    response = client.patch(
        f"/api/bookings/{booking['booking_id']}/status",
        headers=auth_header(shop[0]),
        json={"status": "accepted"}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"


def test_legacy_stored_status_reads_canonical(booking, customer, client):
    asyncio.run(Database.db.bookings.update_one(
        {"booking_id": booking["booking_id"]}, {"$set": {"status": "rejected"}}
    ))
    token, _ = customer
    listed = client.get("/api/bookings/", params={"status": "cancelled"}, headers=auth_header(token)).json()
    assert [b["status"] for b in listed] == ["cancelled"]


def test_concurrent_accept_and_reject_has_one_winner(booking, shop):
    _, shop_uid = shop
    booking_id = booking["booking_id"]

    async def race():
        provider = await user_crud.get_user(shop_uid)
        return await asyncio.gather(
            booking_crud.perform_action(booking_id, provider, "accept"),
            booking_crud.perform_action(booking_id, provider, "reject"),
            return_exceptions=True
        )

    results = asyncio.run(race())
    winners = [r for r in results if not isinstance(r, Exception)]
    losers = [r for r in results if isinstance(r, HTTPException)]
    assert len(winners) == 1 and len(losers) == 1
    assert losers[0].status_code == 409

    stored = asyncio.run(booking_crud.get_booking(booking_id))
    assert stored.status == winners[0].status


def test_lost_write_returns_conflict(booking, shop, monkeypatch):
    """The status filter on the update makes a stale writer fail."""
    _, shop_uid = shop
    booking_id = booking["booking_id"]

    class RacingBookings:
        def __init__(self, real):
            self.real = real

        async def find_one(self, *args, **kwargs):
            stale = await self.real.find_one(*args, **kwargs)
            # someone else cancels between our read and our write
            await self.real.update_one({"booking_id": booking_id}, {"$set": {"status": "cancelled"}})
            return stale

        def __getattr__(self, name):
            return getattr(self.real, name)

    class RacingDatabase(Database):
        def __init__(self):
            super().__init__()
            self.bookings = RacingBookings(self.bookings)

    monkeypatch.setattr(booking_crud, "Database", RacingDatabase)

    async def accept():
        provider = await user_crud.get_user(shop_uid)
        return await booking_crud.perform_action(booking_id, provider, "accept")

    with pytest.raises(HTTPException) as exc:
        asyncio.run(accept())
    assert exc.value.status_code == 409
    stored = asyncio.run(Database.db.bookings.find_one({"booking_id": booking_id}))
    assert stored["status"] == "cancelled"


def test_listing_is_scoped(booking, customer, shop, register, client):
    other_token, _ = register("other@example.com")
    assert client.get("/api/bookings/", headers=auth_header(other_token)).json() == []
    assert len(client.get("/api/bookings/", headers=auth_header(customer[0])).json()) == 1
    assert len(client.get("/api/bookings/", headers=auth_header(shop[0])).json()) == 1
    pending = client.get("/api/bookings/", params={"status": "confirmed"}, headers=auth_header(shop[0])).json()
    assert pending == []


def test_chat_gating(booking, customer, shop, client):
    booking_id = booking["booking_id"]
    user_headers = auth_header(customer[0])
    shop_headers = auth_header(shop[0])
    url = f"/api/bookings/{booking_id}/messages"

    assert client.get(url, headers=user_headers).status_code == 403
    assert client.post(url, headers=user_headers, json={"text": "hello"}).status_code == 403

    act(client, shop[0], booking_id, "accept")
    assert client.post(url, headers=user_headers, json={"text": "Running 5 min late"}).status_code == 200
    reply = client.post(url, headers=shop_headers, json={"text": "No problem"})
    assert reply.json()["sender_role"] == "shopkeeper"
    assert client.post(url, headers=user_headers, json={"text": "   "}).status_code == 422

    messages = client.get(url, headers=shop_headers).json()
    assert [m["text"] for m in messages] == ["Running 5 min late", "No problem"]
    assert messages[0]["sender_role"] == "user"

    act(client, shop[0], booking_id, "complete")
    assert len(client.get(url, headers=user_headers).json()) == 2
    assert client.post(url, headers=user_headers, json={"text": "thanks"}).status_code == 403


def test_review_after_completion(booking, customer, shop, client):
    booking_id = booking["booking_id"]
    user_headers = auth_header(customer[0])
    review_url = f"/api/bookings/{booking_id}/review"

    assert client.post(review_url, headers=user_headers, json={"rating": 5}).status_code == 400

    act(client, shop[0], booking_id, "accept")
    act(client, shop[0], booking_id, "complete")

    assert client.post(review_url, headers=user_headers, json={"rating": 6}).status_code == 422
    assert client.post(review_url, headers=auth_header(shop[0]), json={"rating": 5}).status_code == 403
    response = client.post(review_url, headers=user_headers, json={"rating": 4, "comment": " Great cut "})
    assert response.status_code == 200
    assert response.json()["comment"] == "Great cut"
    assert client.post(review_url, headers=user_headers, json={"rating": 5}).status_code == 400

    shop_profile = client.get(f"/api/shops/{shop[1]}").json()
    assert shop_profile["rating"] == 4.0
    assert shop_profile["total_reviews"] == 1
    assert len(client.get(f"/api/shops/{shop[1]}/reviews").json()) == 1


def test_notifications_follow_the_booking(booking, customer, shop, client):
    shop_headers = auth_header(shop[0])
    user_headers = auth_header(customer[0])

    feed = client.get("/api/notifications/", headers=shop_headers).json()
    assert feed["unread"] == 1
    assert feed["items"][0]["data"]["booking_id"] == booking["booking_id"]

    act(client, shop[0], booking["booking_id"], "accept")
    user_feed = client.get("/api/notifications/", headers=user_headers).json()
    assert user_feed["unread"] == 1
    assert "confirmed" in user_feed["items"][0]["body"]

    assert client.post("/api/notifications/read-all", headers=user_headers).json()["updated"] == 1
    assert client.get("/api/notifications/", headers=user_headers).json()["unread"] == 0


def test_notification_failure_does_not_fail_booking(shop_with_service, customer, client, monkeypatch):
    from services.notification_service import NotificationService

    async def broken_notify(self, *args, **kwargs):
        raise RuntimeError("notification store down")

    monkeypatch.setattr(NotificationService, "notify", broken_notify)
    response = client.post("/api/bookings/", headers=auth_header(customer[0]), json={
        "provider_id": shop_with_service[1], "service_name": "Haircut",
        "booking_date": MONDAY, "booking_time": "11:00 AM"
    })
    assert response.status_code == 200


def test_push_token(customer, client):
    token, uid = customer
    response = client.put("/api/notifications/push-token", headers=auth_header(token), json={"push_token": "ExponentPushToken[abc]"})
    assert response.status_code == 200
    stored = asyncio.run(Database.db.users.find_one({"uid": uid}))
    assert stored["push_token"] == "ExponentPushToken[abc]"


def test_booking_in_the_past_is_rejected(shop_with_service, customer, client):
    response = client.post("/api/bookings/", headers=auth_header(customer[0]), json={
        "provider_id": shop_with_service[1], "service_name": "Haircut",
        "booking_date": "2001-01-08", "booking_time": "10:30 AM"
    })
    assert response.status_code == 400
    assert asyncio.run(Database.db.bookings.count_documents({})) == 0


def test_shop_owner_sees_bookings_it_made_elsewhere(shop_with_service, register, client):
    other_token, other_uid = register("second.shop@example.com", role="shopkeeper", shop_name="Second Shop")
    created = client.post("/api/bookings/", headers=auth_header(other_token), json={
        "provider_id": shop_with_service[1], "service_name": "Haircut",
        "booking_date": MONDAY, "booking_time": "10:30 AM"
    })
    assert created.status_code == 200

    listed = client.get("/api/bookings/", headers=auth_header(other_token)).json()
    assert [b["booking_id"] for b in listed] == [created.json()["booking_id"]]
    assert listed[0]["user_id"] == other_uid

    cancelled = act(client, other_token, created.json()["booking_id"], "cancel")
    assert cancelled.json()["status"] == "cancelled"
