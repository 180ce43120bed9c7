"""Review Routes — verifies review submission, moderation and per-book statistics."""


async def _review(client, book, member, rating=4, **extra):
    return await client.post(
        "/api/v1/reviews",
        json={"bookId": book.id, "memberId": member.id, "rating": rating, **extra},
    )


async def test_new_review_awaits_approval(client, book, member):
    res = await _review(client, book, member, comment="Witty")
    assert res.status_code == 201
    body = res.json()
    assert body["isApproved"] is False
    assert body["bookTitle"] == "Pride and Prejudice"
    assert body["memberName"] == "Ada Lovelace"

    pending = (await client.get("/api/v1/reviews/pending")).json()
    assert [r["id"] for r in pending["items"]] == [body["id"]]
    assert (await client.get("/api/v1/reviews/approved")).json()["totalCount"] == 0


async def test_second_review_by_same_member_is_conflict(client, book, member):
    await _review(client, book, member)
    res = await _review(client, book, member, rating=2)
    assert res.status_code == 409
    assert res.json()["code"] == "DUPLICATE_REVIEW"


async def test_rating_must_be_one_to_five(client, book, member):
    res = await _review(client, book, member, rating=6)
    assert res.status_code == 400
    assert "Rating" in res.json()["errors"]


async def test_unknown_member_is_404(client, book):
    res = await client.post(
        "/api/v1/reviews", json={"bookId": book.id, "memberId": 999, "rating": 3},
    )
    assert res.status_code == 404


async def test_approve_then_edit_resets_approval(client, book, member):
    review = (await _review(client, book, member)).json()
    res = await client.post(f"/api/v1/reviews/{review['id']}/approve")
    assert res.json()["isApproved"] is True

    res = await client.put(
        f"/api/v1/reviews/{review['id']}", json={"rating": 2, "comment": "Changed my mind"},
    )
    assert res.status_code == 200
    assert res.json()["rating"] == 2
    assert res.json()["isApproved"] is False


async def test_reject_deletes_review(client, book, member):
    review = (await _review(client, book, member)).json()
    res = await client.post(
        f"/api/v1/reviews/{review['id']}/reject", json={"reason": "Off topic"},
    )
    assert res.status_code == 204
    assert (await client.get(f"/api/v1/reviews/{review['id']}")).status_code == 404


async def test_reject_requires_reason(client, book, member):
    review = (await _review(client, book, member)).json()
    res = await client.post(f"/api/v1/reviews/{review['id']}/reject", json={"reason": ""})
    assert res.status_code == 400
    assert "Reason" in res.json()["errors"]


async def test_delete_review(client, book, member):
    review = (await _review(client, book, member)).json()
    assert (await client.delete(f"/api/v1/reviews/{review['id']}")).status_code == 204
    assert (await client.delete(f"/api/v1/reviews/{review['id']}")).status_code == 404


async def test_book_stats(client, book, make_member):
    ada = await make_member("M-1")
    grace = await make_member("M-2", "Grace", "Hopper")
    alan = await make_member("M-3", "Alan", "Turing")
    first = (await _review(client, book, ada, rating=5)).json()
    await _review(client, book, grace, rating=4)
    await _review(client, book, alan, rating=4)
    await client.post(f"/api/v1/reviews/{first['id']}/approve")

    stats = (await client.get(f"/api/v1/reviews/book/{book.id}/stats")).json()
    assert stats["bookTitle"] == "Pride and Prejudice"
    assert stats["totalReviews"] == 3
    assert stats["approvedReviews"] == 1
    assert stats["pendingReviews"] == 2
    assert stats["averageRating"] == 4.33
    assert stats["fiveStarCount"] == 1
    assert stats["fourStarCount"] == 2
    assert stats["oneStarCount"] == 0

    by_book = (await client.get(f"/api/v1/reviews/book/{book.id}")).json()
    assert by_book["totalCount"] == 3
    by_member = (await client.get(f"/api/v1/reviews/member/{grace.id}")).json()
    assert [r["rating"] for r in by_member["items"]] == [4]


async def test_stats_for_book_without_reviews(client, book):
    stats = (await client.get(f"/api/v1/reviews/book/{book.id}/stats")).json()
    assert stats["totalReviews"] == 0
    assert stats["averageRating"] == 0.0
