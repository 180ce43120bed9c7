"""Circulation Routes — verifies borrow, return and renew rules and their side effects."""

from datetime import datetime, timedelta, timezone

from backoffice.models import Reservation


async def _borrow(client, book, member, **extra):
    return await client.post(
        "/api/v1/transactions/borrow",
        json={"bookId": book.id, "memberId": member.id, **extra},
    )


async def test_borrow_creates_active_loan_and_updates_counts(client, book, member):
    res = await _borrow(client, book, member, days=7)
    assert res.status_code == 201
    loan = res.json()
    assert loan["status"] == "Active"
    assert loan["type"] == "Borrow"
    assert loan["bookTitle"] == "Pride and Prejudice"
    assert loan["memberName"] == "Ada Lovelace"
    assert loan["renewalCount"] == 0
    assert loan["maxRenewalsAllowed"] == 2
    assert loan["isOverdue"] is False
    assert loan["transactionNumber"].startswith("TXN-")
    checkout = datetime.fromisoformat(loan["checkoutDate"])
    due = datetime.fromisoformat(loan["dueDate"])
    assert due - checkout == timedelta(days=7)

    assert (await client.get(f"/api/v1/books/{book.id}")).json()["availableCopies"] == 1
    assert (await client.get(f"/api/v1/members/{member.id}")).json()["currentBooksCount"] == 1


async def test_borrow_defaults_to_configured_loan_length(client, book, member):
    loan = (await _borrow(client, book, member)).json()
    due = datetime.fromisoformat(loan["dueDate"])
    assert due - datetime.fromisoformat(loan["checkoutDate"]) == timedelta(days=14)


async def test_borrow_audit_entry(client, book, member):
    loan = (await _borrow(client, book, member)).json()
    res = await client.get(f"/api/v1/audit/entity/Transaction/{loan['id']}")
    assert [entry["action"] for entry in res.json()] == ["Borrow"]


async def test_borrow_unavailable_book_is_refused(client, make_book, member):
    book = await make_book(copies=1, available_copies=0)
    res = await _borrow(client, book, member)
    assert res.status_code == 400
    body = res.json()
    assert body["code"] == "BOOK_NOT_AVAILABLE"
    assert body["detail"] == "Book is not available"


async def test_borrow_at_loan_limit_is_refused(client, book, make_member):
    member = await make_member(max_books_allowed=1, current_books_count=1)
    res = await _borrow(client, book, member)
    assert res.status_code == 400
    assert res.json()["detail"] == "Member has reached maximum book limit"


async def test_borrow_by_suspended_member_is_refused(client, book, make_member):
    member = await make_member(status="Suspended")
    res = await _borrow(client, book, member)
    assert res.json()["code"] == "MEMBER_NOT_ACTIVE"


async def test_borrow_over_fine_limit_is_refused(client, book, make_member):
    member = await make_member(total_fines_owed=60)
    res = await _borrow(client, book, member)
    assert res.json()["code"] == "FINE_LIMIT_EXCEEDED"


async def test_borrow_unknown_book_is_404(client, member):
    res = await client.post(
        "/api/v1/transactions/borrow", json={"bookId": 999, "memberId": member.id},
    )
    assert res.status_code == 404


async def test_borrow_days_out_of_range(client, book, member):
    res = await _borrow(client, book, member, days=91)
    assert res.status_code == 400
    assert "Days" in res.json()["errors"]


async def test_on_time_return_restores_counts_without_fine(client, book, member, make_loan):
    loan = await make_loan(book, member, days_ago=2, due_in=12)
    res = await client.post("/api/v1/transactions/return", json={"transactionId": loan.id})
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "Returned"
    assert body["returnDate"] is not None
    assert body["fineAmount"] is None

    assert (await client.get(f"/api/v1/books/{book.id}")).json()["availableCopies"] == 2
    assert (await client.get(f"/api/v1/members/{member.id}")).json()["currentBooksCount"] == 0
    fines = await client.get(f"/api/v1/fines/member/{member.id}")
    assert fines.json()["totalCount"] == 0


async def test_late_return_issues_overdue_fine(client, book, member, make_loan):
    loan = await make_loan(book, member, days_ago=20, due_in=-6)
    res = await client.post("/api/v1/transactions/return", json={"transactionId": loan.id})
    assert res.json()["fineAmount"] == 1.5

    fines = (await client.get(f"/api/v1/fines/member/{member.id}")).json()["items"]
    assert len(fines) == 1
    assert fines[0]["type"] == "OverdueBook"
    assert fines[0]["status"] == "Pending"
    assert fines[0]["amount"] == 1.5
    assert fines[0]["transactionNumber"] == loan.transaction_number

    owed = (await client.get(f"/api/v1/members/{member.id}")).json()["totalFinesOwed"]
    assert owed == 1.5

    notes = (await client.get(f"/api/v1/notifications/member/{member.id}")).json()
    assert [n["type"] for n in notes["items"]] == ["FineIssued"]


async def test_overdue_fine_is_capped(client, book, member, make_loan):
    loan = await make_loan(book, member, days_ago=200, due_in=-186)
    res = await client.post("/api/v1/transactions/return", json={"transactionId": loan.id})
    assert res.json()["fineAmount"] == 20.0


async def test_second_return_is_refused(client, book, member, make_loan):
    loan = await make_loan(book, member, due_in=3)
    await client.post("/api/v1/transactions/return", json={"transactionId": loan.id})
    res = await client.post("/api/v1/transactions/return", json={"transactionId": loan.id})
    assert res.status_code == 400
    assert res.json()["code"] == "ALREADY_RETURNED"


async def test_return_notifies_next_reservation(
    client, test_db, book, member, make_member, make_loan,
):
    waiting = await make_member("M-0002", "Grace", "Hopper")
    now = datetime.now(timezone.utc)
    test_db.add(Reservation(
        reservation_number="RES-TEST-000001", book_id=book.id, member_id=waiting.id,
        reservation_date=now, expiry_date=now + timedelta(days=7),
    ))
    await test_db.commit()
    loan = await make_loan(book, member, due_in=3)

    await client.post("/api/v1/transactions/return", json={"transactionId": loan.id})

    reservations = (await client.get(f"/api/v1/reservations/book/{book.id}")).json()
    assert reservations["items"][0]["notifiedDate"] is not None
    notes = (await client.get(f"/api/v1/notifications/member/{waiting.id}")).json()
    assert [n["type"] for n in notes["items"]] == ["BookAvailable"]


async def test_renew_extends_due_date(client, book, member, make_loan):
    loan = await make_loan(book, member, days_ago=5, due_in=9)
    before = (await client.get(f"/api/v1/transactions/{loan.id}")).json()["dueDate"]
    res = await client.post(
        "/api/v1/transactions/renew",
        json={"transactionId": loan.id, "additionalDays": 10},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["renewalCount"] == 1
    extended = datetime.fromisoformat(body["dueDate"]) - datetime.fromisoformat(before)
    assert extended == timedelta(days=10)


async def test_renew_limit(client, book, member, make_loan):
    loan = await make_loan(book, member, due_in=9)
    payload = {"transactionId": loan.id, "additionalDays": 1}
    for _ in range(2):
        assert (await client.post("/api/v1/transactions/renew", json=payload)).status_code == 200
    res = await client.post("/api/v1/transactions/renew", json=payload)
    assert res.status_code == 400
    assert res.json()["code"] == "RENEWAL_LIMIT_REACHED"


async def test_overdue_loan_cannot_be_renewed(client, book, member, make_loan):
    loan = await make_loan(book, member, due_in=-1)
    res = await client.post("/api/v1/transactions/renew", json={"transactionId": loan.id})
    assert res.json()["code"] == "LOAN_OVERDUE"


async def test_reserved_book_cannot_be_renewed(client, book, member, make_member, make_loan):
    loan = await make_loan(book, member, due_in=5)
    other = await make_member("M-0002", "Grace", "Hopper")
    await client.post(
        "/api/v1/reservations", json={"bookId": book.id, "memberId": other.id},
    )
    res = await client.post("/api/v1/transactions/renew", json={"transactionId": loan.id})
    assert res.json()["code"] == "BOOK_RESERVED"


async def test_overdue_and_active_listings(client, make_book, member, make_loan):
    late_book = await make_book("9780000000001", title="Late")
    fine_book = await make_book("9780000000002", title="On Time")
    await make_loan(late_book, member, "TXN-TEST-000001", due_in=-2)
    await make_loan(fine_book, member, "TXN-TEST-000002", due_in=4)

    overdue = (await client.get("/api/v1/transactions/overdue")).json()
    assert [t["bookTitle"] for t in overdue["items"]] == ["Late"]
    assert overdue["items"][0]["isOverdue"] is True

    active = (await client.get("/api/v1/transactions/active")).json()
    assert [t["bookTitle"] for t in active["items"]] == ["Late", "On Time"]

    by_member = (await client.get(f"/api/v1/transactions/member/{member.id}")).json()
    assert by_member["totalCount"] == 2


async def test_stats(client, make_book, member, make_loan):
    returned_book = await make_book("9780000000001")
    late_book = await make_book("9780000000002")
    returned = await make_loan(returned_book, member, "TXN-TEST-000001", due_in=5)
    await make_loan(late_book, member, "TXN-TEST-000002", due_in=-3)
    await client.post("/api/v1/transactions/return", json={"transactionId": returned.id})

    stats = (await client.get("/api/v1/transactions/stats")).json()
    assert stats["totalTransactions"] == 2
    assert stats["activeTransactions"] == 1
    assert stats["overdueTransactions"] == 1
    assert stats["completedTransactions"] == 1
    assert stats["totalFines"] == 0
    assert stats["averageBorrowDuration"] > 19
