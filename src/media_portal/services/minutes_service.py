"""Meeting minutes and their file attachments."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from media_portal.config import get_settings
from media_portal.exceptions import (
    AttachmentNotFoundError,
    ForbiddenError,
    MinutesNotFoundError,
    ValidationError,
)
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.minutes import MinutesListResponse, MinutesResponse
from media_portal.models.orm.base import utc_now
from media_portal.models.orm.meeting_minutes import MeetingMinutesORM
from media_portal.repositories.minutes_repository import MinutesRepository
from media_portal.repositories.user_repository import UserRepository
from media_portal.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {
    ".pdf",
    ".doc",
    ".docx",
    ".txt",
    ".odt",
    ".png",
    ".jpg",
    ".jpeg",
}

MIME_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}


@dataclass(frozen=True)
class MinutesFields:
    """Form fields of an upload or update; None means unchanged."""

    title: str | None = None
    meeting_date: datetime | None = None
    attendees: list[UUID] | None = None
    summary: str | None = None
    content: str | None = None
    is_published: bool | None = None


class AttachmentStorage:
    """Stores attachment files under the configured uploads directory."""

    def __init__(self, base_dir: Path | None = None) -> None:
        settings = get_settings()
        self.base_dir = base_dir or settings.uploads_dir
        self.max_size = settings.max_attachment_size_mb * 1024 * 1024

    @staticmethod
    def validate_file_path(file_path: Path, base_dir: Path) -> bool:
        """Validate that file path is within base directory."""
        try:
            return file_path.resolve().is_relative_to(base_dir.resolve())
        except (ValueError, RuntimeError):
            return False

    async def save(self, upload: UploadFile) -> dict[str, Any]:
        """Write one upload to disk.

        Returns:
            Attachment metadata as stored on the minutes record

        Raises:
            ValidationError: Disallowed type or file too large
        """
        original_name = Path(upload.filename or "").name
        ext = Path(original_name).suffix.lower()
        if not original_name or ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                f"File type not allowed. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
            )

        content = await upload.read()
        if len(content) > self.max_size:
            raise ValidationError(
                f"File too large. Maximum size: {self.max_size // 1024 // 1024}MB"
            )

        stored_filename = f"{uuid.uuid4()}{ext}"
        self.base_dir.mkdir(parents=True, exist_ok=True)
        (self.base_dir / stored_filename).write_bytes(content)

        return {
            "filename": stored_filename,
            "original_name": original_name,
            "path": stored_filename,
            "size": len(content),
            "mimetype": MIME_TYPES.get(ext, "application/octet-stream"),
            "uploaded_at": utc_now().isoformat(),
        }

    def resolve(self, attachment: dict[str, Any]) -> Path | None:
        """Absolute path of a stored attachment, or None if missing or unsafe."""
        file_path = self.base_dir / attachment["filename"]
        if not self.validate_file_path(file_path, self.base_dir) or not file_path.exists():
            return None
        return file_path

    def remove(self, attachments: list[dict[str, Any]]) -> None:
        for attachment in attachments:
            file_path = self.resolve(attachment)
            if file_path is None:
                continue
            try:
                file_path.unlink()
            except OSError as e:
                logger.warning("Failed to delete attachment %s: %s", attachment["filename"], e)


class MinutesService:
    """Publishing meeting minutes."""

    def __init__(self, session: AsyncSession, storage: AttachmentStorage | None = None) -> None:
        self.session = session
        self.minutes_repo = MinutesRepository(session)
        self.user_repo = UserRepository(session)
        self.notification_service = NotificationService(session)
        self.storage = storage or AttachmentStorage()
        self.max_attachments = get_settings().max_minutes_attachments

    async def list_published(
        self, page: int = 1, page_size: int = 10, search: str | None = None
    ) -> MinutesListResponse:
        items, total = await self.minutes_repo.get_published(
            search=search, offset=(page - 1) * page_size, limit=page_size
        )
        return MinutesListResponse(
            items=[MinutesResponse.model_validate(m) for m in items],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=(total + page_size - 1) // page_size,
        )

    async def _get(self, minutes_id: UUID) -> MeetingMinutesORM:
        minutes = await self.minutes_repo.get(minutes_id)
        if minutes is None:
            raise MinutesNotFoundError()
        return minutes

    async def get(self, minutes_id: UUID, principal: Principal) -> MeetingMinutesORM:
        """Raises ForbiddenError for unpublished minutes unless the caller is an admin."""
        minutes = await self._get(minutes_id)
        if not minutes.is_published and not principal.is_admin:
            raise ForbiddenError("These minutes are not published yet")
        return minutes

    async def _store_files(self, files: list[UploadFile], already: int = 0) -> list[dict[str, Any]]:
        if already + len(files) > self.max_attachments:
            raise ValidationError(f"At most {self.max_attachments} attachments are allowed")
        stored: list[dict[str, Any]] = []
        try:
            for upload in files:
                stored.append(await self.storage.save(upload))
        except ValidationError:
            self.storage.remove(stored)
            raise
        return stored

    async def upload(
        self,
        fields: MinutesFields,
        files: list[UploadFile],
        actor: Principal,
    ) -> tuple[MeetingMinutesORM, int]:
        """Create minutes with attachments; notify all active users when published.

        Returns:
            (minutes, number of notifications created)

        Raises:
            ValidationError: Missing title, date or content, or a rejected file
        """
        if not fields.title or fields.meeting_date is None or not fields.content:
            raise ValidationError("Title, meeting date, and content are required")

        attachments = await self._store_files(files)
        minutes = await self.minutes_repo.create(
            title=fields.title,
            meeting_date=fields.meeting_date,
            attendees=[str(a) for a in fields.attendees or []],
            summary=fields.summary,
            content=fields.content,
            attachments=attachments,
            uploaded_by=actor.id,
            is_published=True if fields.is_published is None else fields.is_published,
        )

        notified = 0
        if minutes.is_published:
            notified = await self.notification_service.notify_minutes_uploaded(
                minutes, await self.user_repo.get_active_ids()
            )
        logger.info("Minutes %s uploaded with %d attachments", minutes.id, len(attachments))
        return minutes, notified

    async def update(
        self,
        minutes_id: UUID,
        fields: MinutesFields,
        files: list[UploadFile],
    ) -> MeetingMinutesORM:
        """Update fields and append any new attachments."""
        minutes = await self._get(minutes_id)
        new_attachments = await self._store_files(files, already=len(minutes.attachments or []))

        changes: dict[str, Any] = {}
        if fields.title:
            changes["title"] = fields.title
        if fields.meeting_date is not None:
            changes["meeting_date"] = fields.meeting_date
        if fields.attendees is not None:
            changes["attendees"] = [str(a) for a in fields.attendees]
        if fields.summary is not None:
            changes["summary"] = fields.summary
        if fields.content:
            changes["content"] = fields.content
        if fields.is_published is not None:
            changes["is_published"] = fields.is_published
        if new_attachments:
            # Reassign so the JSON column is flagged as modified
            changes["attachments"] = [*(minutes.attachments or []), *new_attachments]

        return await self.minutes_repo.update(minutes_id, **changes)

    async def delete(self, minutes_id: UUID) -> None:
        """Delete the record and its files."""
        minutes = await self._get(minutes_id)
        attachments = list(minutes.attachments or [])
        await self.minutes_repo.delete(minutes_id)
        self.storage.remove(attachments)

    async def get_attachment(
        self, minutes_id: UUID, index: int, principal: Principal
    ) -> tuple[Path, dict[str, Any]]:
        """Locate an attachment by its position on the minutes record.

        Raises:
            AttachmentNotFoundError: Index out of range or file missing on disk
        """
        minutes = await self.get(minutes_id, principal)
        attachments = minutes.attachments or []
        if index < 0 or index >= len(attachments):
            raise AttachmentNotFoundError("Attachment not found")
        attachment = attachments[index]
        file_path = self.storage.resolve(attachment)
        if file_path is None:
            raise AttachmentNotFoundError("File not found on server")
        return file_path, attachment
