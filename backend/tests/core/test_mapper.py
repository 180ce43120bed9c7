"""Mapper — verifies convention copying, resolvers and the registered profiles."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import BaseModel

from backoffice.core.domain_types import BookStatus, MembershipType
from backoffice.mapping.mapper import MappingProfile
from backoffice.mapping.profiles import mapper
from backoffice.models import Book, Category, Member, Transaction
from backoffice.schemas.book import BookCreate
from backoffice.schemas.category import CategoryUpdate
from backoffice.schemas.member import MemberCreate, MemberResponse
from backoffice.schemas.transaction import TransactionResponse


class _Source(BaseModel):
    name: str
    size: int = 0


class _Dest(BaseModel):
    name: str
    size: int = 0
    label: str = "default"


def test_unregistered_pair_raises_lookup_error():
    with pytest.raises(LookupError):
        MappingProfile().map(_Source(name="x"), _Dest)


def test_missing_source_fields_keep_destination_default():
    profile = MappingProfile()
    profile.create_map(_Source, _Dest)
    assert profile.map(_Source(name="x", size=3), _Dest) == _Dest(name="x", size=3)


def test_resolver_overrides_convention():
    profile = MappingProfile()
    profile.create_map(_Source, _Dest, label=lambda s: s.name.upper())
    assert profile.map(_Source(name="abc"), _Dest).label == "ABC"


def test_resolver_for_unknown_field_rejected():
    with pytest.raises(ValueError):
        MappingProfile().create_map(_Source, _Dest, nonexistent=lambda s: 1)


def test_write_dto_to_entity_stores_enum_values():
    dto = BookCreate(
        isbn="9780141439518", title="Emma", author="Jane Austen", category_id=4,
        total_copies=2, available_copies=1, price=Decimal("9.99"),
        status=BookStatus.UNDER_MAINTENANCE,
    )
    book = mapper.map(dto, Book)
    assert isinstance(book, Book)
    assert book.id is None
    assert book.status == "UnderMaintenance"
    assert book.category_id == 4
    assert book.price == Decimal("9.99")


def test_map_onto_updates_existing_entity():
    category = Category(id=7, name="Old", description="x", is_active=True)
    mapper.map_onto(CategoryUpdate(name="New", is_active=False), category)
    assert category.id == 7
    assert category.name == "New"
    assert category.description is None
    assert category.is_active is False


def test_member_response_carries_full_name():
    member = mapper.map(
        MemberCreate(
            membership_number="M-1", first_name="Ada", last_name="Lovelace",
            email="ada@example.org", membership_type=MembershipType.PREMIUM,
            membership_start_date=date(2026, 1, 1),
            membership_end_date=date(2027, 1, 1),
        ),
        Member,
    )
    now = datetime.now(timezone.utc)
    member.id = 1
    member.status = "Active"
    member.max_books_allowed = 5
    member.current_books_count = 0
    member.total_fines_owed = Decimal("0")
    member.max_fine_limit = Decimal("50")
    member.created_at = member.updated_at = now
    response = mapper.map(member, MemberResponse)
    assert response.full_name == "Ada Lovelace"
    assert response.membership_type == MembershipType.PREMIUM


def test_transaction_response_flattens_names_and_derives_overdue():
    now = datetime.now(timezone.utc)
    book = Book(id=1, title="Emma")
    member = Member(id=2, first_name="Ada", last_name="Lovelace")
    transaction = Transaction(
        id=3, transaction_number="TXN-1", book_id=1, member_id=2, book=book,
        member=member, type="Borrow", checkout_date=now - timedelta(days=20),
        due_date=now - timedelta(days=6), status="Active", renewal_count=0,
        max_renewals_allowed=2, created_at=now,
    )
    response = mapper.map(transaction, TransactionResponse)
    assert response.book_title == "Emma"
    assert response.member_name == "Ada Lovelace"
    assert response.is_overdue is True
