"""Registration DTOs."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from media_portal.models.domain.registration import Gender, MediaSkill, RegistrationStatus


class RegistrationCreate(BaseModel):
    """Public application form."""

    full_name: str = Field(min_length=1, max_length=255)
    gender: Gender
    age_range: str = Field(min_length=1, max_length=20)
    phone_number: str = Field(min_length=1, max_length=50)
    email: EmailStr

    parish_location: str = Field(min_length=1, max_length=255)
    parish_name: str = Field(min_length=1, max_length=255)
    is_member: str = Field(min_length=1, max_length=10)
    membership_number: str | None = Field(default=None, max_length=100)

    media_skills: list[MediaSkill] = Field(min_length=1)
    other_skills: str | None = None
    area_of_interest: list[str] = []

    has_experience: bool = False
    experience_details: str | None = None
    has_equipment: bool = False
    equipment_description: str | None = None

    availability: str = Field(min_length=1, max_length=100)
    commitment: str = Field(min_length=1, max_length=100)

    emergency_contact_name: str = Field(min_length=1, max_length=255)
    emergency_contact_relationship: str = Field(min_length=1, max_length=100)
    emergency_contact_phone: str = Field(min_length=1, max_length=50)

    additional_info: str | None = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("full_name", "parish_location", "parish_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class RegistrationResponse(BaseModel):
    """Stored application."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    full_name: str
    gender: str
    age_range: str
    phone_number: str
    email: str
    parish_location: str
    parish_name: str
    is_member: str
    membership_number: str | None = None
    media_skills: list[str]
    other_skills: str | None = None
    area_of_interest: list[str]
    has_experience: bool
    experience_details: str | None = None
    has_equipment: bool
    equipment_description: str | None = None
    availability: str
    commitment: str
    emergency_contact_name: str
    emergency_contact_relationship: str
    emergency_contact_phone: str
    additional_info: str | None = None
    status: str
    submitted_at: datetime
    user_id: UUID | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    rejection_reason: str | None = None


class RegistrationListResponse(BaseModel):
    """Paginated registration list response."""

    items: list[RegistrationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class SubmissionResponse(BaseModel):
    """Acknowledgement returned to the applicant."""

    success: bool = True
    message: str = "Registration submitted successfully"
    id: UUID


class RegistrationStatusUpdate(BaseModel):
    """Set a registration status directly."""

    status: RegistrationStatus


class RejectRequest(BaseModel):
    """Reject an application."""

    reason: str | None = Field(default=None, max_length=2000)


class ApprovalResponse(BaseModel):
    """Result of approving an application."""

    success: bool = True
    message: str = "Application approved and user account created"
    registration: RegistrationResponse
    user_id: UUID
    username: str


class RegistrationStatsResponse(BaseModel):
    """Totals per status and recent submissions."""

    total: int
    pending: int
    approved: int
    rejected: int
    account_created: int
    last_7_days: int
