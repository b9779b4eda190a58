"""Query parameter sanitization tests.

SQLAlchemy parameterizes every query; these tests cover the normalization
layer in front of it (search terms, whitelisted sort columns and statuses,
LIKE escaping) and the identifiers derived from user input.
"""

import pytest

MALICIOUS_PAYLOADS = [
    "'; DROP TABLE registrations; --",
    "1' OR '1'='1",
    "' UNION SELECT * FROM admins --",
    "1' AND (SELECT COUNT(*) FROM admins) > 0 --",
    "1'; SELECT pg_sleep(5) --",
    "1'; UPDATE users SET is_active = true; --",
    "%27%20OR%201%3D1%20--",
    "ʼ; DROP TABLE users; --",
    "1'/**/OR/**/1=1--",
    "$$; DROP TABLE roles; $$",
    "1'\x00 OR 1=1 --",
]


class TestSearchSanitization:
    """Free-text search terms."""

    @pytest.mark.parametrize("payload", MALICIOUS_PAYLOADS)
    def test_statement_separators_removed(self, payload: str) -> None:
        from media_portal.utils.validation import sanitize_search

        result = sanitize_search(payload)

        if result is not None:
            assert ";" not in result
            assert "--" not in result
            assert len(result) <= 200

    def test_blank_search_becomes_none(self) -> None:
        from media_portal.utils.validation import sanitize_search

        assert sanitize_search(None) is None
        assert sanitize_search("   ") is None
        assert sanitize_search(";;") is None

    def test_length_capped(self) -> None:
        from media_portal.utils.validation import sanitize_search

        assert len(sanitize_search("a" * 500)) == 200


class TestWhitelists:
    """Sort columns and status filters only accept known values."""

    @pytest.mark.parametrize("payload", MALICIOUS_PAYLOADS)
    def test_sort_column_whitelist_rejects_injection(self, payload: str) -> None:
        from media_portal.utils.validation import validate_sort_by

        allowed_columns = {"full_name", "submitted_at", "email"}
        result = validate_sort_by(payload, allowed_columns, "submitted_at")

        assert result in allowed_columns

    def test_sort_column_accepts_known_column(self) -> None:
        from media_portal.utils.validation import validate_sort_by

        assert validate_sort_by("email", {"email", "submitted_at"}, "submitted_at") == "email"

    @pytest.mark.parametrize("payload", MALICIOUS_PAYLOADS)
    def test_status_filter_whitelist_rejects_injection(self, payload: str) -> None:
        from media_portal.utils.validation import sanitize_status

        allowed_statuses = {"pending", "approved", "rejected", "account_created"}
        result = sanitize_status(payload, allowed_statuses)

        assert result is None or result in allowed_statuses

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Pending", "pending"),
            ("  approved ", "approved"),
            ("all", None),
            ("ALL", None),
            ("", None),
            ("archived", None),
        ],
    )
    def test_status_normalized(self, raw: str, expected: str | None) -> None:
        from media_portal.utils.validation import sanitize_status

        allowed_statuses = {"pending", "approved", "rejected", "account_created"}
        assert sanitize_status(raw, allowed_statuses) == expected


class TestLikeEscaping:
    def test_like_wildcard_escaping(self) -> None:
        """Verify LIKE wildcards are properly escaped."""
        from media_portal.utils.validation import escape_like_wildcards

        assert escape_like_wildcards("test%value") == r"test\%value"
        assert escape_like_wildcards("test_value") == r"test\_value"
        assert escape_like_wildcards("test%_value") == r"test\%\_value"
        assert escape_like_wildcards("back\\slash") == "back\\\\slash"


class TestDerivedIdentifiers:
    """Role slugs and member usernames."""

    @pytest.mark.parametrize(
        "name,slug",
        [
            ("Media Manager", "media-manager"),
            ("Live  Streaming   Operator", "live-streaming-operator"),
            ("  Secretary ", "secretary"),
            ("Photographer", "photographer"),
        ],
    )
    def test_slugify(self, name: str, slug: str) -> None:
        from media_portal.utils.validation import slugify

        assert slugify(name) == slug

    def test_email_local_part(self) -> None:
        from media_portal.utils.validation import email_local_part

        assert email_local_part("John.Doe@Example.org") == "john.doe"
