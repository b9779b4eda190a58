"""Tabular reports with summary breakdowns."""

from collections import Counter
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.models.dto.event import EventResponse
from media_portal.models.dto.registration import RegistrationResponse
from media_portal.models.dto.report import (
    ApplicationsReportResponse,
    ApplicationsSummary,
    EventsReportResponse,
    EventsSummary,
    MembersReportResponse,
    MembersSummary,
)
from media_portal.models.orm.base import utc_now
from media_portal.repositories.event_repository import EventRepository
from media_portal.repositories.registration_repository import RegistrationRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.services.analytics_service import as_utc
from media_portal.services.user_service import build_user_response


class ReportService:
    """Builds the admin reports."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.registration_repo = RegistrationRepository(session)
        self.event_repo = EventRepository(session)
        self.user_repo = UserRepository(session)

    async def applications(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        status: str | None = None,
    ) -> ApplicationsReportResponse:
        registrations = await self.registration_repo.get_in_range(start, end, status)

        by_skill: Counter[str] = Counter()
        for registration in registrations:
            by_skill.update(registration.media_skills or [])

        return ApplicationsReportResponse(
            applications=[RegistrationResponse.model_validate(r) for r in registrations],
            summary=ApplicationsSummary(
                total=len(registrations),
                by_status=dict(Counter(r.status for r in registrations)),
                by_skill=dict(by_skill),
                by_parish=dict(
                    Counter(r.parish_location for r in registrations if r.parish_location)
                ),
                by_gender=dict(Counter(r.gender for r in registrations if r.gender)),
                by_age_range=dict(Counter(r.age_range for r in registrations if r.age_range)),
            ),
        )

    async def members(self) -> MembersReportResponse:
        """All users with roles; skills and parish come from the linked application."""
        users = await self.user_repo.get_all_with_roles()
        registrations = {
            r.id: r
            for r in await self.registration_repo.get_many(
                [u.registration_id for u in users if u.registration_id]
            )
        }

        by_role: Counter[str] = Counter()
        by_skill: Counter[str] = Counter()
        by_parish: Counter[str] = Counter()
        for user in users:
            by_role.update(a.role.name for a in user.role_assignments)
            registration = registrations.get(user.registration_id)
            if registration is not None:
                by_skill.update(registration.media_skills or [])
                if registration.parish_location:
                    by_parish[registration.parish_location] += 1

        active = sum(1 for u in users if u.is_active)
        return MembersReportResponse(
            members=[build_user_response(u) for u in users],
            summary=MembersSummary(
                total=len(users),
                active=active,
                inactive=len(users) - active,
                by_role=dict(by_role),
                by_skill=dict(by_skill),
                by_parish=dict(by_parish),
            ),
        )

    async def events(
        self, start: datetime | None = None, end: datetime | None = None
    ) -> EventsReportResponse:
        events = await self.event_repo.get_in_range(start, end, newest_first=True)
        now = utc_now()

        total_attendees = sum(len(e.attendees or []) for e in events)
        upcoming = sum(1 for e in events if as_utc(e.event_date) >= now)

        return EventsReportResponse(
            events=[EventResponse.model_validate(e) for e in events],
            summary=EventsSummary(
                total=len(events),
                by_type=dict(Counter(e.event_type for e in events)),
                total_attendees=total_attendees,
                avg_attendees=round(total_attendees / len(events)) if events else 0,
                upcoming=upcoming,
                past=len(events) - upcoming,
            ),
        )
