"""Statistics Routes — verifies overview figures, rankings, overdue analysis and trends."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from backoffice.models import Fine, Reservation, Review, Transaction


async def test_overview(client, test_db, book, member, make_loan):
    await make_loan(book, member, due_in=-6)
    test_db.add_all([
        Fine(fine_number="FINE-TEST-000001", member_id=member.id, amount=Decimal("5.00")),
        Fine(
            fine_number="FINE-TEST-000002", member_id=member.id, amount=Decimal("3.00"),
            paid_amount=Decimal("3.00"), status="Paid",
        ),
    ])
    await test_db.commit()

    res = await client.get("/api/v1/statistics/overview")
    assert res.status_code == 200
    overview = res.json()
    assert overview["totalBooks"] == 1
    assert overview["totalCopies"] == 2
    assert overview["availableCopies"] == 1
    assert overview["totalMembers"] == 1
    assert overview["activeMembers"] == 1
    assert overview["activeLoans"] == 1
    assert overview["overdueItems"] == 1
    assert overview["totalFines"] == 8.0
    assert overview["outstandingFines"] == 5.0
    assert overview["activeReservations"] == 0
    assert overview["booksByCategory"] == {"Category 9780141439518": 1}
    assert overview["membersByType"] == {"Regular": 1}


async def test_top_books_ranked_by_checkouts(
    client, test_db, make_book, member, make_member, make_loan,
):
    popular = await make_book("9780000000001", "Dune", "Frank Herbert", copies=3)
    quiet = await make_book("9780000000002", "Emma", "Jane Austen")
    other = await make_member("M-0002", "Grace", "Hopper")
    await make_loan(popular, member, "TXN-TEST-000001", due_in=3)
    await make_loan(popular, other, "TXN-TEST-000002", due_in=3)
    await make_loan(quiet, member, "TXN-TEST-000003", due_in=3)
    now = datetime.now(timezone.utc)
    test_db.add_all([
        Review(book_id=popular.id, member_id=member.id, rating=4, is_approved=True),
        Review(book_id=popular.id, member_id=other.id, rating=1, is_approved=False),
        Reservation(
            reservation_number="RES-TEST-000001", book_id=quiet.id, member_id=other.id,
            reservation_date=now, expiry_date=now + timedelta(days=7),
        ),
    ])
    await test_db.commit()

    ranking = (await client.get("/api/v1/statistics/top-books")).json()
    assert [row["title"] for row in ranking] == ["Dune", "Emma"]
    assert ranking[0]["checkoutCount"] == 2
    assert ranking[0]["averageRating"] == 4.0
    assert ranking[0]["reviewCount"] == 1
    assert ranking[0]["reservationCount"] == 0
    assert ranking[1]["reservationCount"] == 1

    limited = (await client.get("/api/v1/statistics/top-books?topCount=1")).json()
    assert [row["bookId"] for row in limited] == [popular.id]

    in_category = (
        await client.get(f"/api/v1/statistics/top-books?categoryId={quiet.category_id}")
    ).json()
    assert [row["title"] for row in in_category] == ["Emma"]


async def test_top_members_count_late_loans(client, make_book, member, make_member, make_loan):
    other = await make_member("M-0002", "Grace", "Hopper", membership_type="Faculty")
    first = await make_book("9780000000001")
    second = await make_book("9780000000002")
    await make_loan(first, member, "TXN-TEST-000001", due_in=-6)
    await make_loan(second, member, "TXN-TEST-000002", due_in=3)
    await make_loan(second, other, "TXN-TEST-000003", due_in=3)

    ranking = (await client.get("/api/v1/statistics/top-members")).json()
    assert [row["memberName"] for row in ranking] == ["Ada Lovelace", "Grace Hopper"]
    assert ranking[0]["checkoutCount"] == 2
    assert ranking[0]["overdueCount"] == 1
    assert ranking[0]["membershipType"] == "Regular"
    assert ranking[1]["overdueCount"] == 0

    faculty = (
        await client.get("/api/v1/statistics/top-members?membershipType=faculty")
    ).json()
    assert [row["memberId"] for row in faculty] == [other.id]


async def test_ranking_rules(client):
    res = await client.get(
        "/api/v1/statistics/top-books",
        params={"topCount": 0, "fromDate": "2024-05-02", "toDate": "2024-05-01"},
    )
    assert res.status_code == 400
    assert set(res.json()["errors"]) == {"TopCount", "FromDate"}

    res = await client.get("/api/v1/statistics/top-members?membershipType=Guest")
    assert res.status_code == 400
    assert "MembershipType" in res.json()["errors"]


async def test_overdue_analysis(client, make_book, member, make_member, make_loan):
    other = await make_member("M-0002", "Grace", "Hopper")
    books = [await make_book(f"978000000000{i}") for i in range(1, 4)]
    await make_loan(books[0], member, "TXN-TEST-000001", due_in=-3)
    await make_loan(books[1], member, "TXN-TEST-000002", due_in=-10)
    await make_loan(books[2], other, "TXN-TEST-000003", days_ago=54, due_in=-40)

    analysis = (await client.get("/api/v1/statistics/overdue-analysis")).json()
    assert analysis["totalOverdueBooks"] == 3
    assert analysis["totalOverdueMembers"] == 2
    assert analysis["totalFines"] == 13.25
    assert analysis["averageDaysOverdue"] == 17.67
    assert analysis["overduePatterns"] == [
        {"pattern": "1-7 days", "count": 1, "percentage": 33.33},
        {"pattern": "8-14 days", "count": 1, "percentage": 33.33},
        {"pattern": "15-30 days", "count": 0, "percentage": 0.0},
        {"pattern": "31+ days", "count": 1, "percentage": 33.33},
    ]
    top = analysis["topOverdueMembers"]
    assert [row["memberName"] for row in top] == ["Ada Lovelace", "Grace Hopper"]
    assert top[0]["overdueCount"] == 2
    assert top[0]["totalFines"] == 3.25
    assert top[0]["averageDaysOverdue"] == 6.5
    assert top[1]["totalFines"] == 10.0


async def test_overdue_analysis_limited_to_due_dates_in_range(
    client, make_book, member, make_loan,
):
    recent = await make_book("9780000000001")
    older = await make_book("9780000000002")
    await make_loan(recent, member, "TXN-TEST-000001", due_in=-3)
    await make_loan(older, member, "TXN-TEST-000002", due_in=-10)

    since = (datetime.now(timezone.utc).date() - timedelta(days=5)).isoformat()
    analysis = (
        await client.get(f"/api/v1/statistics/overdue-analysis?fromDate={since}")
    ).json()
    assert analysis["fromDate"] == since
    assert analysis["totalOverdueBooks"] == 1
    assert analysis["totalFines"] == 0.75


async def test_overdue_analysis_empty(client):
    analysis = (await client.get("/api/v1/statistics/overdue-analysis")).json()
    assert analysis["totalOverdueBooks"] == 0
    assert analysis["averageDaysOverdue"] == 0.0
    assert analysis["topOverdueMembers"] == []
    assert {p["percentage"] for p in analysis["overduePatterns"]} == {0.0}


async def test_monthly_trends(client, test_db, book, make_member):
    member = await make_member(created_at=datetime(2024, 3, 1, 9, tzinfo=timezone.utc))
    test_db.add_all([
        Transaction(
            transaction_number="TXN-TEST-000001", book_id=book.id, member_id=member.id,
            checkout_date=datetime(2024, 3, 5, 10, tzinfo=timezone.utc),
            due_date=datetime(2024, 3, 19, 10, tzinfo=timezone.utc),
            return_date=datetime(2024, 4, 2, 10, tzinfo=timezone.utc),
            status="Returned",
        ),
        Fine(
            fine_number="FINE-TEST-000001", member_id=member.id, amount=Decimal("1.50"),
            issue_date=datetime(2024, 4, 2, 10, tzinfo=timezone.utc),
            paid_date=datetime(2024, 4, 2, 11, tzinfo=timezone.utc),
            paid_amount=Decimal("1.50"), status="Paid",
        ),
    ])
    await test_db.commit()

    trends = (await client.get("/api/v1/statistics/trends?year=2024")).json()
    assert trends["year"] == 2024
    assert [m["month"] for m in trends["months"]] == list(range(1, 13))
    march, april = trends["months"][2], trends["months"][3]
    assert (march["borrowed"], march["returned"], march["newMembers"]) == (1, 0, 1)
    assert (april["returned"], april["finesIssued"], april["finesCollected"]) == (1, 1, 1.5)
    assert trends["totalBorrowed"] == 1
    assert trends["totalFinesCollected"] == 1.5

    other_year = (await client.get("/api/v1/statistics/trends?year=2023")).json()
    assert other_year["totalBorrowed"] == 0


async def test_trends_default_to_current_year(client):
    trends = (await client.get("/api/v1/statistics/trends")).json()
    assert trends["year"] == datetime.now(timezone.utc).year

    res = await client.get("/api/v1/statistics/trends?year=1800")
    assert res.status_code == 400
    assert "Year" in res.json()["errors"]
