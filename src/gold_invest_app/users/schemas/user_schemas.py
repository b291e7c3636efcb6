from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from gold_invest_app.core.base.base import BaseResponse, CamelModel
from gold_invest_app.users.utils.kyc_status import KycStatus
from gold_invest_app.users.utils.user_role import UserRole


class UserCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class AddressSchema(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class KycDocumentsResponse(CamelModel):
    id_proof: Optional[str] = None
    address_proof: Optional[str] = None
    selfie: Optional[str] = None
    rejection_reason: Optional[str] = None
    resubmission_message: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None


class UserResponse(BaseResponse):
    first_name: str
    last_name: str
    email: EmailStr
    role: UserRole
    phone: Optional[str] = None
    address: AddressSchema = AddressSchema()
    id_number: Optional[str] = None
    birth_date: Optional[datetime] = None
    kyc_status: KycStatus
    kyc_documents: KycDocumentsResponse = KycDocumentsResponse()
    is_email_verified: bool = False
    created_at: datetime
    updated_at: datetime


class AuthResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdateRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[AddressSchema] = None


class PasswordChangeRequest(CamelModel):
    current_password: str
    new_password: str = Field(min_length=6)


class KycRejectRequest(CamelModel):
    rejection_reason: Optional[str] = None


class KycResubmitRequest(CamelModel):
    resubmission_message: Optional[str] = None


class KycDocumentPaths(CamelModel):
    id_proof: Optional[str] = None
    address_proof: Optional[str] = None
    selfie: Optional[str] = None


class KycSubmissionResponse(CamelModel):
    kyc_status: KycStatus
    documents: KycDocumentPaths


class KycReviewResponse(BaseResponse):
    first_name: str
    last_name: str
    email: EmailStr
    kyc_status: KycStatus
    rejection_reason: Optional[str] = None
    resubmission_message: Optional[str] = None
