"""Meeting minutes and attachment storage tests."""

import io
from datetime import UTC, datetime

import pytest
from fastapi import UploadFile
from sqlalchemy import select

from conftest import admin_principal, make_admin, make_user, user_principal
from media_portal.exceptions import AttachmentNotFoundError, ForbiddenError, ValidationError
from media_portal.models.orm import NotificationORM
from media_portal.services.minutes_service import AttachmentStorage, MinutesFields, MinutesService


def _upload(filename: str, content: bytes = b"%PDF-1.4 minutes") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


def _fields(**overrides) -> MinutesFields:
    values = {
        "title": "Planning meeting",
        "meeting_date": datetime(2026, 3, 1, 10, 0, tzinfo=UTC),
        "content": "Discussed the Easter schedule.",
    }
    values.update(overrides)
    return MinutesFields(**values)


@pytest.fixture
def storage(tmp_path) -> AttachmentStorage:
    return AttachmentStorage(tmp_path / "minutes")


class TestAttachmentStorage:
    async def test_save_writes_file_under_generated_name(self, storage) -> None:
        attachment = await storage.save(_upload("agenda.PDF"))

        assert attachment["original_name"] == "agenda.PDF"
        assert attachment["filename"].endswith(".pdf")
        assert attachment["mimetype"] == "application/pdf"
        assert storage.resolve(attachment).read_bytes() == b"%PDF-1.4 minutes"

    async def test_disallowed_extension_rejected(self, storage) -> None:
        with pytest.raises(ValidationError, match="File type not allowed"):
            await storage.save(_upload("payload.exe"))

    async def test_oversized_file_rejected(self, storage) -> None:
        storage.max_size = 10

        with pytest.raises(ValidationError, match="File too large"):
            await storage.save(_upload("big.txt", b"x" * 11))

    def test_traversal_outside_base_dir_not_resolved(self, storage) -> None:
        assert storage.resolve({"filename": "../../etc/passwd"}) is None


class TestMinutesService:
    async def test_published_upload_notifies_active_users(self, session, storage) -> None:
        admin = await make_admin(session)
        await make_user(session, "one")
        await make_user(session, "two")

        minutes, notified = await MinutesService(session, storage).upload(
            _fields(), [_upload("notes.pdf")], admin_principal(admin)
        )

        assert notified == 2
        assert len(minutes.attachments) == 1
        types = set((await session.execute(select(NotificationORM.type))).scalars().all())
        assert types == {"meeting_uploaded"}

    async def test_draft_upload_notifies_nobody(self, session, storage) -> None:
        admin = await make_admin(session)
        await make_user(session)

        _, notified = await MinutesService(session, storage).upload(
            _fields(is_published=False), [], admin_principal(admin)
        )

        assert notified == 0

    async def test_required_fields(self, session, storage) -> None:
        admin = await make_admin(session)

        with pytest.raises(ValidationError, match="required"):
            await MinutesService(session, storage).upload(
                _fields(content=""), [], admin_principal(admin)
            )

    async def test_attachment_limit_counts_existing_files(self, session, storage) -> None:
        admin = await make_admin(session)
        service = MinutesService(session, storage)
        service.max_attachments = 2
        minutes, _ = await service.upload(_fields(), [_upload("a.txt")], admin_principal(admin))

        with pytest.raises(ValidationError, match="At most 2"):
            await service.update(minutes.id, MinutesFields(), [_upload("b.txt"), _upload("c.txt")])

        updated = await service.update(minutes.id, MinutesFields(), [_upload("b.txt")])
        assert [a["original_name"] for a in updated.attachments] == ["a.txt", "b.txt"]

    async def test_unpublished_minutes_hidden_from_members(self, session, storage) -> None:
        admin = await make_admin(session)
        member = await make_user(session)
        service = MinutesService(session, storage)
        minutes, _ = await service.upload(_fields(is_published=False), [], admin_principal(admin))

        with pytest.raises(ForbiddenError):
            await service.get(minutes.id, user_principal(member))
        assert (await service.get(minutes.id, admin_principal(admin))).id == minutes.id
        assert (await service.list_published()).total == 0

    async def test_get_attachment_by_index(self, session, storage) -> None:
        admin = await make_admin(session)
        member = await make_user(session)
        service = MinutesService(session, storage)
        minutes, _ = await service.upload(_fields(), [_upload("notes.pdf")], admin_principal(admin))

        path, attachment = await service.get_attachment(minutes.id, 0, user_principal(member))

        assert path.exists()
        assert attachment["original_name"] == "notes.pdf"
        with pytest.raises(AttachmentNotFoundError, match="Attachment not found"):
            await service.get_attachment(minutes.id, 1, user_principal(member))

    async def test_delete_removes_files(self, session, storage) -> None:
        admin = await make_admin(session)
        service = MinutesService(session, storage)
        minutes, _ = await service.upload(_fields(), [_upload("notes.pdf")], admin_principal(admin))
        path = storage.resolve(minutes.attachments[0])

        await service.delete(minutes.id)

        assert not path.exists()
