"""Aggregated dashboards over applications, events and members."""

from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.models.domain.registration import ACCEPTED_STATUSES, RegistrationStatus
from media_portal.models.dto.analytics import (
    AnalyticsOverviewResponse,
    EventAnalyticsResponse,
    EventTypeAttendance,
    MemberAnalyticsResponse,
    MonthlyApprovalRate,
)
from media_portal.models.dto.common import CountItem, TrendPoint
from media_portal.models.orm.base import utc_now
from media_portal.repositories.event_repository import EventRepository
from media_portal.repositories.registration_repository import RegistrationRepository
from media_portal.repositories.user_repository import UserRepository

TREND_DAYS = 30
TIMELINE_MONTHS = 6
TOP_PARISHES = 10


def months_ago(now: datetime, months: int) -> datetime:
    """Same day and time ``months`` calendar months earlier, clamped to month end."""
    year, month = divmod(now.year * 12 + now.month - 1 - months, 12)
    month += 1
    day = now.day
    while day > 28:
        try:
            return now.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1
    return now.replace(year=year, month=month, day=day)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps returned by drivers without time zone support."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _trend(dates: list[datetime], fmt: str) -> list[TrendPoint]:
    counts = Counter(as_utc(d).strftime(fmt) for d in dates)
    return [TrendPoint(period=p, count=counts[p]) for p in sorted(counts)]


class AnalyticsService:
    """Read-only analytics for the admin dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.registration_repo = RegistrationRepository(session)
        self.event_repo = EventRepository(session)
        self.user_repo = UserRepository(session)

    async def overview(self) -> AnalyticsOverviewResponse:
        """Application trends and demographics of accepted members."""
        now = utc_now()

        recent = await self.registration_repo.get_submissions_since(now - timedelta(days=TREND_DAYS))
        application_trends = _trend([submitted for submitted, _ in recent], "%Y-%m-%d")

        skill_counts: Counter[str] = Counter()
        for skills in await self.registration_repo.get_accepted_skills():
            skill_counts.update(skills)

        accepted = {s.value for s in ACCEPTED_STATUSES}
        months: dict[str, Counter[str]] = defaultdict(Counter)
        for submitted, status in await self.registration_repo.get_submissions_since(
            months_ago(now, TIMELINE_MONTHS)
        ):
            if status in accepted:
                months[as_utc(submitted).strftime("%Y-%m")]["approved"] += 1
            elif status == RegistrationStatus.REJECTED:
                months[as_utc(submitted).strftime("%Y-%m")]["rejected"] += 1
        approval_rate = [
            MonthlyApprovalRate(
                month=month,
                approved=months[month]["approved"],
                rejected=months[month]["rejected"],
                total=months[month]["approved"] + months[month]["rejected"],
            )
            for month in sorted(months)
        ]

        parishes = await self.registration_repo.count_accepted_by(
            "parish_location", limit=TOP_PARISHES
        )
        genders = await self.registration_repo.count_accepted_by("gender")
        ages = await self.registration_repo.count_accepted_by("age_range")

        return AnalyticsOverviewResponse(
            application_trends=application_trends,
            skills_distribution=[
                CountItem(name=s, count=n) for s, n in skill_counts.most_common()
            ],
            approval_rate_by_month=approval_rate,
            geographic_distribution=[CountItem(name=p, count=n) for p, n in parishes],
            gender_distribution=[CountItem(name=g, count=n) for g, n in genders],
            age_range_distribution=sorted(
                (CountItem(name=a, count=n) for a, n in ages), key=lambda item: item.name
            ),
        )

    async def events(self) -> EventAnalyticsResponse:
        now = utc_now()
        by_type = await self.event_repo.count_by_type()
        upcoming, past = await self.event_repo.count_upcoming_and_past(now)

        attendees: dict[str, list[int]] = defaultdict(list)
        for event in await self.event_repo.get_in_range():
            attendees[event.event_type].append(len(event.attendees or []))
        attendance = sorted(
            (
                EventTypeAttendance(
                    event_type=event_type,
                    avg_attendees=sum(sizes) / len(sizes),
                    total_events=len(sizes),
                )
                for event_type, sizes in attendees.items()
            ),
            key=lambda item: item.avg_attendees,
            reverse=True,
        )

        recent = await self.event_repo.get_in_range(start=months_ago(now, TIMELINE_MONTHS))
        return EventAnalyticsResponse(
            event_count_by_type=[CountItem(name=t, count=n) for t, n in by_type],
            avg_attendance_by_type=attendance,
            upcoming_count=upcoming,
            past_count=past,
            events_timeline=_trend([e.event_date for e in recent], "%Y-%m"),
        )

    async def members(self) -> MemberAnalyticsResponse:
        active, inactive = await self.user_repo.count_by_active()
        created = await self.user_repo.get_created_since(months_ago(utc_now(), TIMELINE_MONTHS))
        return MemberAnalyticsResponse(
            total_active=active,
            total_inactive=inactive,
            member_growth=_trend(created, "%Y-%m"),
        )
