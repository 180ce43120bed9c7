"""Member Routes — verifies member CRUD, uniqueness, delete guards and membership extension."""

from datetime import date, timedelta


def _member_payload(**overrides) -> dict:
    payload = {
        "membershipNumber": "M-1000",
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": "grace@example.org",
        "membershipType": "Faculty",
        "membershipStartDate": "2026-01-01",
        "membershipEndDate": "2026-12-31",
    }
    payload.update(overrides)
    return payload


async def test_create_member(client):
    res = await client.post("/api/v1/members", json=_member_payload())
    assert res.status_code == 201
    body = res.json()
    assert body["membershipNumber"] == "M-1000"
    assert body["fullName"] == "Grace Hopper"
    assert body["status"] == "Active"
    assert body["maxBooksAllowed"] == 5
    assert body["totalFinesOwed"] == 0
    assert body["maxFineLimit"] == 50


async def test_snake_case_input_is_accepted(client):
    payload = {
        "membership_number": "M-2000", "first_name": "Alan", "last_name": "Turing",
        "email": "alan@example.org", "membership_start_date": "2026-01-01",
        "membership_end_date": "2026-12-31",
    }
    res = await client.post("/api/v1/members", json=payload)
    assert res.status_code == 201
    assert res.json()["lastName"] == "Turing"


async def test_current_books_cannot_exceed_max(client):
    res = await client.post(
        "/api/v1/members",
        json=_member_payload(maxBooksAllowed=2, currentBooksCount=3),
    )
    assert res.status_code == 400
    assert res.json()["errors"]["CurrentBooksCount"] == [
        "'CurrentBooksCount' cannot exceed 'MaxBooksAllowed'.",
    ]


async def test_invalid_enum_value_is_validation_error(client):
    res = await client.post("/api/v1/members", json=_member_payload(membershipType="Gold"))
    assert res.status_code == 400
    assert "MembershipType" in res.json()["errors"]


async def test_duplicate_membership_number_and_email(client, member):
    res = await client.post(
        "/api/v1/members", json=_member_payload(membershipNumber=member.membership_number),
    )
    assert res.status_code == 409
    assert res.json()["code"] == "DUPLICATE_MEMBERSHIP_NUMBER"

    res = await client.post(
        "/api/v1/members", json=_member_payload(email=member.email.upper()),
    )
    assert res.status_code == 409
    assert res.json()["code"] == "DUPLICATE_EMAIL"


async def test_update_member_keeps_own_email(client, member):
    res = await client.put(
        f"/api/v1/members/{member.id}",
        json=_member_payload(
            membershipNumber=member.membership_number, email=member.email,
            firstName="Augusta",
        ),
    )
    assert res.status_code == 200
    assert res.json()["firstName"] == "Augusta"
    assert res.json()["id"] == member.id


async def test_search_orders_by_last_then_first_name(client, make_member):
    await make_member("M-1", "Zoe", "Adams")
    await make_member("M-2", "Amy", "Adams")
    await make_member("M-3", "Bob", "Brown")
    res = await client.get("/api/v1/members", params={"search": "adams"})
    assert [m["fullName"] for m in res.json()["items"]] == ["Amy Adams", "Zoe Adams"]

    res = await client.get("/api/v1/members")
    assert [m["fullName"] for m in res.json()["items"]] == [
        "Amy Adams", "Zoe Adams", "Bob Brown",
    ]


async def test_delete_member_with_active_loan_is_refused(client, book, member, make_loan):
    await make_loan(book, member, due_in=3)
    res = await client.delete(f"/api/v1/members/{member.id}")
    assert res.status_code == 400
    assert res.json()["code"] == "MEMBER_HAS_LOANS"


async def test_delete_member(client, member):
    assert (await client.delete(f"/api/v1/members/{member.id}")).status_code == 204
    assert (await client.get(f"/api/v1/members/{member.id}")).status_code == 404


async def test_extend_membership_reactivates_expired_member(client, make_member):
    lapsed = date.today() - timedelta(days=10)
    member = await make_member(status="Expired", membership_end_date=lapsed)
    res = await client.post(
        f"/api/v1/members/{member.id}/extend-membership", json={"months": 1},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "Active"
    assert date.fromisoformat(body["membershipEndDate"]) > date.today()


async def test_extend_membership_months_out_of_range(client, member):
    res = await client.post(
        f"/api/v1/members/{member.id}/extend-membership", json={"months": 61},
    )
    assert res.status_code == 400
    assert "Months" in res.json()["errors"]


async def test_missing_email_reported_with_rule_violations(client):
    payload = _member_payload(lastName="", membershipEndDate="2025-06-30")
    del payload["email"]
    res = await client.post("/api/v1/members", json=payload)
    assert res.status_code == 400
    errors = res.json()["errors"]
    assert set(errors) == {"Email", "LastName", "MembershipEndDate"}
    assert errors["Email"] == ["'Email' is required."]
