"""Registration and event domain enumerations."""

from enum import StrEnum


class RegistrationStatus(StrEnum):
    """Lifecycle of a membership application."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACCOUNT_CREATED = "account_created"


# Statuses counted as accepted members in statistics
ACCEPTED_STATUSES = (RegistrationStatus.APPROVED, RegistrationStatus.ACCOUNT_CREATED)


class Gender(StrEnum):
    """Applicant gender."""

    MALE = "male"
    FEMALE = "female"


class MediaSkill(StrEnum):
    """Skills an applicant can declare."""

    PHOTOGRAPHY = "photography"
    VIDEOGRAPHY = "videography"
    VIDEO_EDITING = "video-editing"
    GRAPHIC_DESIGN = "graphic-design"
    SOCIAL_MEDIA = "social-media"
    CONTENT_WRITING = "content-writing"
    LIVE_STREAMING = "live-streaming"
    PUBLIC_RELATIONS = "public-relations"


class EventType(StrEnum):
    """Calendar event categories."""

    MEETING = "meeting"
    SERVICE = "service"
    TRAINING = "training"
    EVENT = "event"
    OTHER = "other"
