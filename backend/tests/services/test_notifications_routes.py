"""Notification Routes — verifies member notifications, bulk send and read state."""


async def _notify(client, member, title="Welcome", **extra):
    return await client.post(
        "/api/v1/notifications",
        json={"memberId": member.id, "title": title, "message": "Hello!", **extra},
    )


async def test_create_notification_starts_unread(client, member):
    res = await _notify(client, member, type="BookDue")
    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "Unread"
    assert body["type"] == "BookDue"
    assert body["memberName"] == "Ada Lovelace"
    assert body["readAt"] is None
    assert body["isEmailSent"] is False


async def test_notification_for_unknown_member_is_404(client):
    res = await client.post(
        "/api/v1/notifications", json={"memberId": 321, "title": "Hi", "message": "Hi"},
    )
    assert res.status_code == 404


async def test_title_and_message_required(client, member):
    res = await client.post(
        "/api/v1/notifications", json={"memberId": member.id, "title": "", "message": ""},
    )
    assert res.status_code == 400
    assert set(res.json()["errors"]) == {"Title", "Message"}


async def test_bulk_send_reports_unknown_members(client, member, make_member):
    other = await make_member("M-0002", "Grace", "Hopper")
    res = await client.post(
        "/api/v1/notifications/bulk",
        json={
            "memberIds": [member.id, other.id, member.id, 999],
            "title": "Closure", "message": "Closed on Monday",
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["totalSent"] == 3
    assert body["successCount"] == 2
    assert body["failureCount"] == 1
    assert body["errors"] == ["Member with id 999 was not found"]

    mine = (await client.get(f"/api/v1/notifications/member/{member.id}")).json()
    assert mine["totalCount"] == 1


async def test_bulk_send_requires_recipients(client):
    res = await client.post(
        "/api/v1/notifications/bulk",
        json={"memberIds": [], "title": "Closure", "message": "Closed"},
    )
    assert res.status_code == 400
    assert "MemberIds" in res.json()["errors"]


async def test_mark_one_read(client, member):
    created = (await _notify(client, member)).json()
    res = await client.post(f"/api/v1/notifications/{created['id']}/read")
    assert res.status_code == 200
    assert res.json()["status"] == "Read"
    assert res.json()["readAt"] is not None


async def test_mark_many_read_counts_only_unread(client, member):
    first = (await _notify(client, member, "One")).json()
    second = (await _notify(client, member, "Two")).json()
    await client.post(f"/api/v1/notifications/{first['id']}/read")

    res = await client.post(
        "/api/v1/notifications/mark-read",
        json={"notificationIds": [first["id"], second["id"]]},
    )
    assert res.status_code == 200
    assert res.json()["affected"] == 1

    unread = (await client.get(f"/api/v1/notifications/member/{member.id}/unread")).json()
    assert unread["totalCount"] == 0


async def test_unread_listing_and_stats(client, member):
    first = (await _notify(client, member, "One")).json()
    await _notify(client, member, "Two")
    await client.post(f"/api/v1/notifications/{first['id']}/read")

    unread = (await client.get(f"/api/v1/notifications/member/{member.id}/unread")).json()
    assert [n["title"] for n in unread["items"]] == ["Two"]

    stats = (await client.get(f"/api/v1/notifications/member/{member.id}/stats")).json()
    assert stats["memberName"] == "Ada Lovelace"
    assert stats["totalNotifications"] == 2
    assert stats["unreadCount"] == 1
    assert stats["readCount"] == 1
    assert stats["lastNotificationDate"] is not None


async def test_stats_for_member_without_notifications(client, member):
    stats = (await client.get(f"/api/v1/notifications/member/{member.id}/stats")).json()
    assert stats["totalNotifications"] == 0
    assert stats["lastNotificationDate"] is None


async def test_delete_notification(client, member):
    created = (await _notify(client, member)).json()
    assert (await client.delete(f"/api/v1/notifications/{created['id']}")).status_code == 204
    assert (await client.get(f"/api/v1/notifications/{created['id']}")).status_code == 404
