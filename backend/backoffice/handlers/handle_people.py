"""People Handlers — members and librarians."""

from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.domain_types import LibrarianStatus
from backoffice.core.paging import PageRequest
from backoffice.core.validate_people import (
    CHANGE_ROLE_VALIDATOR, EXTEND_MEMBERSHIP_VALIDATOR, LIBRARIAN_CREATE_VALIDATOR,
    LIBRARIAN_UPDATE_VALIDATOR, MEMBER_VALIDATOR,
)
from backoffice.handlers.common import ensure_valid, to_page
from backoffice.mapping.profiles import mapper
from backoffice.models import Librarian, Member
from backoffice.schemas.common import PagedResult
from backoffice.schemas.librarian import (
    ChangeRoleRequest, LibrarianCreate, LibrarianResponse, LibrarianStats,
    LibrarianUpdate,
)
from backoffice.schemas.member import (
    ExtendMembershipRequest, MemberCreate, MemberResponse, MemberUpdate,
)
from backoffice.services.audit_service import snapshot
from backoffice.services.people_service import LibrarianService, MemberService


class MemberHandlers:
    def __init__(self, db: AsyncSession):
        self.service = MemberService(db)

    async def create(self, command: MemberCreate) -> MemberResponse:
        ensure_valid(MEMBER_VALIDATOR, command)
        member = await self.service.create(mapper.map(command, Member))
        return mapper.map(member, MemberResponse)

    async def update(self, member_id: int, command: MemberUpdate) -> MemberResponse:
        ensure_valid(MEMBER_VALIDATOR, command)
        member = await self.service.get(member_id)
        old_values = snapshot(member)
        mapper.map_onto(command, member)
        member = await self.service.update(member, old_values)
        return mapper.map(member, MemberResponse)

    async def delete(self, member_id: int) -> None:
        await self.service.delete(member_id)

    async def get(self, member_id: int) -> MemberResponse:
        return mapper.map(await self.service.get(member_id), MemberResponse)

    async def search(
        self, request: PageRequest, term: str | None = None, status: str | None = None,
    ) -> PagedResult[MemberResponse]:
        return to_page(
            await self.service.search(request, term, status), request, MemberResponse,
        )

    async def extend_membership(
        self, member_id: int, command: ExtendMembershipRequest,
    ) -> MemberResponse:
        ensure_valid(EXTEND_MEMBERSHIP_VALIDATOR, command)
        member = await self.service.extend_membership(member_id, command.months)
        return mapper.map(member, MemberResponse)


class LibrarianHandlers:
    def __init__(self, db: AsyncSession):
        self.service = LibrarianService(db)

    async def create(self, command: LibrarianCreate) -> LibrarianResponse:
        ensure_valid(LIBRARIAN_CREATE_VALIDATOR, command)
        librarian = await self.service.create(mapper.map(command, Librarian))
        return mapper.map(librarian, LibrarianResponse)

    async def update(
        self, librarian_id: int, command: LibrarianUpdate,
    ) -> LibrarianResponse:
        ensure_valid(LIBRARIAN_UPDATE_VALIDATOR, command)
        librarian = await self.service.get(librarian_id)
        old_values = snapshot(librarian)
        mapper.map_onto(command, librarian)
        librarian = await self.service.update(librarian, old_values)
        return mapper.map(librarian, LibrarianResponse)

    async def delete(self, librarian_id: int) -> None:
        await self.service.delete(librarian_id)

    async def get(self, librarian_id: int) -> LibrarianResponse:
        return mapper.map(await self.service.get(librarian_id), LibrarianResponse)

    async def search(
        self, request: PageRequest, term: str | None = None,
        role: str | None = None, status: str | None = None,
    ) -> PagedResult[LibrarianResponse]:
        result = await self.service.search(request, term, role, status)
        return to_page(result, request, LibrarianResponse)

    async def activate(self, librarian_id: int) -> LibrarianResponse:
        librarian = await self.service.set_status(librarian_id, LibrarianStatus.ACTIVE)
        return mapper.map(librarian, LibrarianResponse)

    async def deactivate(self, librarian_id: int) -> LibrarianResponse:
        librarian = await self.service.set_status(librarian_id, LibrarianStatus.INACTIVE)
        return mapper.map(librarian, LibrarianResponse)

    async def change_role(
        self, librarian_id: int, command: ChangeRoleRequest,
    ) -> LibrarianResponse:
        ensure_valid(CHANGE_ROLE_VALIDATOR, command)
        librarian = await self.service.change_role(librarian_id, command.new_role)
        return mapper.map(librarian, LibrarianResponse)

    async def stats(self) -> LibrarianStats:
        return LibrarianStats(**await self.service.stats())
