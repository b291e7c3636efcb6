from beanie import before_event, Replace, Save
from pydantic import BaseModel, EmailStr, Field, field_validator
from pymongo import ASCENDING, IndexModel
from typing import Optional
from datetime import datetime, timezone
from uuid import UUID
from gold_invest_app.core.base.base import BaseCollection
from gold_invest_app.users.utils.kyc_status import KycStatus
from gold_invest_app.users.utils.user_role import UserRole


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class KycDocuments(BaseModel):
    # Web paths under /uploads/kyc/<user id>/
    id_proof: Optional[str] = None
    address_proof: Optional[str] = None
    selfie: Optional[str] = None

    # Review metadata, written only by admin actions
    rejection_reason: Optional[str] = None
    resubmission_message: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None


class UserModel(BaseCollection):

    first_name: str
    last_name: str
    email: EmailStr
    password: Optional[str] = None
    role: UserRole = Field(default=UserRole.USER)

    phone: Optional[str] = None
    address: Address = Field(default_factory=Address)
    id_number: Optional[str] = None
    birth_date: Optional[datetime] = None

    kyc_status: KycStatus = Field(default=KycStatus.NOT_SUBMITTED)
    kyc_documents: KycDocuments = Field(default_factory=KycDocuments)

    is_email_verified: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    # Auto-update "updated_at" on update
    @before_event([Save, Replace])
    def update_timestamp(self):
        self.updated_at = datetime.now(timezone.utc)

    class Settings:
        name = "users"
        indexes = [
            IndexModel([("email", ASCENDING)], unique=True),
            IndexModel([("kyc_status", ASCENDING)]),
        ]
