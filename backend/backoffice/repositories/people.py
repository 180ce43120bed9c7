"""People Repositories — members and librarians."""

from sqlalchemy import func, or_, select

from backoffice.core.paging import PageRequest
from backoffice.models import Librarian, Member
from backoffice.repositories.base import BaseRepository


class MemberRepository(BaseRepository[Member]):
    model = Member

    async def search(
        self, request: PageRequest, term: str | None = None,
        status: str | None = None,
    ) -> tuple[list[Member], int]:
        """Name, e-mail or membership number contains `term`; ordered by last, first name."""
        criteria = []
        if term and term.strip():
            t = term.strip()
            criteria.append(or_(
                Member.first_name.icontains(t, autoescape=True),
                Member.last_name.icontains(t, autoescape=True),
                Member.email.icontains(t, autoescape=True),
                Member.membership_number.icontains(t, autoescape=True),
            ))
        if status:
            criteria.append(Member.status == status)
        return await self.page(
            request, *criteria, order_by=[Member.last_name, Member.first_name],
        )

    async def get_by_membership_number(self, number: str) -> Member | None:
        return await self.find_one(Member.membership_number == number)

    async def get_by_email(self, email: str) -> Member | None:
        return await self.find_one(func.lower(Member.email) == email.strip().lower())

    async def get_many(self, ids: list[int]) -> dict[int, Member]:
        if not ids:
            return {}
        members = await self.find_all(Member.id.in_(ids))
        return {m.id: m for m in members}


class LibrarianRepository(BaseRepository[Librarian]):
    model = Librarian

    async def search(
        self, request: PageRequest, term: str | None = None,
        role: str | None = None, status: str | None = None,
    ) -> tuple[list[Librarian], int]:
        criteria = []
        if term and term.strip():
            t = term.strip()
            criteria.append(or_(
                Librarian.first_name.icontains(t, autoescape=True),
                Librarian.last_name.icontains(t, autoescape=True),
                Librarian.email.icontains(t, autoescape=True),
                Librarian.employee_number.icontains(t, autoescape=True),
            ))
        if role:
            criteria.append(Librarian.role == role)
        if status:
            criteria.append(Librarian.status == status)
        return await self.page(
            request, *criteria, order_by=[Librarian.last_name, Librarian.first_name],
        )

    async def get_by_employee_number(self, number: str) -> Librarian | None:
        return await self.find_one(Librarian.employee_number == number)

    async def get_by_email(self, email: str) -> Librarian | None:
        return await self.find_one(func.lower(Librarian.email) == email.strip().lower())

    async def count_by(self, column) -> dict[str, int]:
        result = await self.db.execute(
            select(column, func.count(Librarian.id)).group_by(column),
        )
        return {str(k): int(n) for k, n in result.all()}
