"""Fine Routes — verifies payment, waiver and the fine summaries."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from backoffice.models import Fine


@pytest.fixture
def make_fine(test_db):
    async def _make(member, number="FINE-TEST-000001", amount="5.00", **fields) -> Fine:
        now = datetime.now(timezone.utc)
        fields.setdefault("due_date", now + timedelta(days=30))
        fine = Fine(
            fine_number=number, member_id=member.id, amount=Decimal(amount), **fields,
        )
        member.total_fines_owed += Decimal(amount)
        test_db.add(fine)
        await test_db.commit()
        return fine
    return _make


async def _pay(client, fine, amount, method="Cash"):
    return await client.post(
        f"/api/v1/fines/{fine.id}/pay", json={"amount": amount, "paymentMethod": method},
    )


async def test_partial_then_full_payment(client, member, make_fine):
    fine = await make_fine(member)

    res = await _pay(client, fine, 2)
    assert res.status_code == 200
    assert res.json()["status"] == "PartiallyPaid"
    assert res.json()["paidAmount"] == 2.0
    assert res.json()["paidDate"] is None
    owed = (await client.get(f"/api/v1/members/{member.id}")).json()["totalFinesOwed"]
    assert owed == 3.0

    res = await _pay(client, fine, 3)
    assert res.json()["status"] == "Paid"
    assert res.json()["paidAmount"] == 5.0
    assert res.json()["paidDate"] is not None
    owed = (await client.get(f"/api/v1/members/{member.id}")).json()["totalFinesOwed"]
    assert owed == 0


async def test_overpayment_never_drives_owed_below_zero(client, member, make_fine):
    fine = await make_fine(member)
    res = await _pay(client, fine, 8)
    assert res.json()["status"] == "Paid"
    owed = (await client.get(f"/api/v1/members/{member.id}")).json()["totalFinesOwed"]
    assert owed == 0


async def test_paid_fine_cannot_be_paid_or_waived(client, member, make_fine):
    fine = await make_fine(member, status="Paid")
    res = await _pay(client, fine, 1)
    assert res.status_code == 400
    assert res.json()["code"] == "FINE_NOT_PAYABLE"

    res = await client.post(f"/api/v1/fines/{fine.id}/waive", json={"reason": "Goodwill"})
    assert res.json()["code"] == "FINE_NOT_WAIVABLE"


async def test_payment_requires_positive_amount_and_method(client, member, make_fine):
    fine = await make_fine(member)
    res = await _pay(client, fine, 0, method="")
    assert res.status_code == 400
    assert set(res.json()["errors"]) == {"Amount", "PaymentMethod"}


async def test_waive_clears_outstanding_balance(client, member, make_fine):
    fine = await make_fine(member)
    await _pay(client, fine, 1)
    res = await client.post(
        f"/api/v1/fines/{fine.id}/waive", json={"reason": "First offence"},
    )
    assert res.status_code == 200
    assert res.json()["status"] == "Waived"
    assert res.json()["notes"] == "Waived: First offence"
    owed = (await client.get(f"/api/v1/members/{member.id}")).json()["totalFinesOwed"]
    assert owed == 0


async def test_pay_and_waive_are_audited(client, member, make_fine):
    fine = await make_fine(member)
    await _pay(client, fine, 1)
    await client.post(f"/api/v1/fines/{fine.id}/waive", json={"reason": "Goodwill"})
    entries = (await client.get(f"/api/v1/audit/entity/Fine/{fine.id}")).json()
    assert sorted(e["action"] for e in entries) == ["Pay", "Waive"]


async def test_pending_and_overdue_listings(client, member, make_fine):
    past = datetime.now(timezone.utc) - timedelta(days=1)
    await make_fine(member, "FINE-TEST-000001")
    await make_fine(member, "FINE-TEST-000002", due_date=past)
    await make_fine(member, "FINE-TEST-000003", status="Paid")

    pending = (await client.get("/api/v1/fines/pending")).json()
    assert pending["totalCount"] == 2
    overdue = (await client.get("/api/v1/fines/overdue")).json()
    assert [f["fineNumber"] for f in overdue["items"]] == ["FINE-TEST-000002"]


async def test_member_summary(client, member, make_fine):
    first = await make_fine(member, "FINE-TEST-000001", amount="4.00")
    await make_fine(member, "FINE-TEST-000002", amount="6.00")
    await _pay(client, first, 4)

    summary = (await client.get(f"/api/v1/fines/member/{member.id}/summary")).json()
    assert summary["memberName"] == "Ada Lovelace"
    assert summary["totalFines"] == 2
    assert summary["pendingFines"] == 1
    assert summary["paidFines"] == 1
    assert summary["totalAmount"] == 10.0
    assert summary["pendingAmount"] == 6.0
    assert summary["paidAmount"] == 4.0


async def test_overall_summary(client, member, make_fine):
    first = await make_fine(member, "FINE-TEST-000001", amount="4.00")
    await make_fine(member, "FINE-TEST-000002", amount="6.00")
    await _pay(client, first, 4)

    summary = (await client.get("/api/v1/fines/summary")).json()
    assert summary["totalFines"] == 2
    assert summary["pendingFines"] == 1
    assert summary["paidFines"] == 1
    assert summary["totalAmount"] == 10.0
    assert summary["pendingAmount"] == 6.0
    assert summary["paidAmount"] == 4.0
    assert summary["averageFineAmount"] == 5.0


async def test_member_summary_for_unknown_member_is_404(client):
    assert (await client.get("/api/v1/fines/member/404/summary")).status_code == 404
