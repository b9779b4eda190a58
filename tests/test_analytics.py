"""Dashboard analytics and report tests."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from conftest import assign, make_registration, make_role, make_user
from media_portal.models.orm import EventORM
from media_portal.services.analytics_service import AnalyticsService, as_utc, months_ago
from media_portal.services.report_service import ReportService


def _event(title: str, days: int, event_type: str = "meeting", attendees: int = 0) -> EventORM:
    return EventORM(
        title=title,
        event_date=datetime.now(UTC) + timedelta(days=days),
        event_time="10:00",
        event_type=event_type,
        created_by=uuid4(),
        attendees=[str(uuid4()) for _ in range(attendees)],
    )


class TestDateHelpers:
    @pytest.mark.parametrize(
        "now,months,expected",
        [
            (datetime(2026, 8, 15, tzinfo=UTC), 6, datetime(2026, 2, 15, tzinfo=UTC)),
            (datetime(2026, 3, 31, tzinfo=UTC), 1, datetime(2026, 2, 28, tzinfo=UTC)),
            (datetime(2026, 1, 10, tzinfo=UTC), 2, datetime(2025, 11, 10, tzinfo=UTC)),
            (datetime(2024, 5, 31, tzinfo=UTC), 3, datetime(2024, 2, 29, tzinfo=UTC)),
        ],
    )
    def test_months_ago(self, now: datetime, months: int, expected: datetime) -> None:
        assert months_ago(now, months) == expected

    def test_as_utc_only_fills_missing_zone(self) -> None:
        naive = datetime(2026, 1, 1, 12, 0)
        aware = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

        assert as_utc(naive) == aware
        assert as_utc(aware) is aware


class TestAnalytics:
    async def test_overview_counts_only_accepted_demographics(self, session) -> None:
        await make_registration(session, email="a@example.org", status="account_created")
        await make_registration(
            session,
            email="b@example.org",
            status="approved",
            parish_location="Abuja",
            media_skills=["photography"],
        )
        await make_registration(session, email="c@example.org", status="rejected")
        await make_registration(session, email="d@example.org")

        overview = await AnalyticsService(session).overview()

        assert sum(p.count for p in overview.application_trends) == 4
        skills = {item.name: item.count for item in overview.skills_distribution}
        assert skills == {"photography": 2, "video-editing": 1}
        month = overview.approval_rate_by_month[-1]
        assert (month.approved, month.rejected, month.total) == (2, 1, 3)
        parishes = {item.name: item.count for item in overview.geographic_distribution}
        assert parishes == {"Lagos": 1, "Abuja": 1}

    async def test_event_analytics(self, session) -> None:
        session.add_all(
            [
                _event("Rehearsal", 3, "training", attendees=4),
                _event("Retreat", 10, "training", attendees=2),
                _event("Mass", -5, "service", attendees=6),
            ]
        )
        await session.flush()

        analytics = await AnalyticsService(session).events()

        assert analytics.upcoming_count == 2
        assert analytics.past_count == 1
        assert analytics.avg_attendance_by_type[0].event_type == "service"
        training = analytics.avg_attendance_by_type[1]
        assert (training.avg_attendees, training.total_events) == (3.0, 2)

    async def test_member_analytics(self, session) -> None:
        await make_user(session, "active")
        await make_user(session, "gone", is_active=False)

        members = await AnalyticsService(session).members()

        assert (members.total_active, members.total_inactive) == (1, 1)
        assert sum(p.count for p in members.member_growth) == 2


class TestReports:
    async def test_applications_report_filtered_by_status(self, session) -> None:
        await make_registration(session, email="a@example.org")
        await make_registration(session, email="b@example.org", status="rejected")

        report = await ReportService(session).applications(status="pending")

        assert report.summary.total == 1
        assert report.summary.by_status == {"pending": 1}
        assert report.summary.by_skill == {"photography": 1, "video-editing": 1}

    async def test_members_report_uses_linked_application(self, session) -> None:
        registration = await make_registration(session, status="account_created")
        user = await make_user(session)
        user.registration_id = registration.id
        await assign(session, user, await make_role(session, "Photographer", ["create_content"]))
        await session.flush()
        session.expunge_all()

        report = await ReportService(session).members()

        assert report.summary.total == 1
        assert report.summary.by_role == {"Photographer": 1}
        assert report.summary.by_parish == {"Lagos": 1}
        assert report.summary.by_skill == {"photography": 1, "video-editing": 1}

    async def test_events_report_rounds_average(self, session) -> None:
        session.add_all([_event("One", 1, attendees=1), _event("Two", -1, attendees=2)])
        await session.flush()

        report = await ReportService(session).events()

        assert report.summary.total == 2
        assert report.summary.total_attendees == 3
        assert report.summary.avg_attendees == 2
        assert (report.summary.upcoming, report.summary.past) == (1, 1)
