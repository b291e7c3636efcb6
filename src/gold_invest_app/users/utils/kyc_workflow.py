"""
KYC lifecycle for a user record.

    not_submitted -> pending -> approved | rejected | resubmission_requested
    rejected | resubmission_requested -> pending

The functions here only mutate the in-memory UserModel; callers persist it.
Admin reviews are not guarded against each other: the last save wins.
"""
import logging
from datetime import datetime, timezone
from typing import Mapping, Optional
from fastapi import HTTPException, status
from pydantic import BaseModel
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.utils.kyc_status import KycStatus, LOCKED_KYC_STATUSES

logger = logging.getLogger(__name__)

DOCUMENT_FIELDS = ("id_proof", "address_proof", "selfie")


class KycPersonalInfo(BaseModel):
    id_number: Optional[str] = None
    birth_date: Optional[datetime] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


def ensure_can_submit(user: UserModel) -> None:
    if user.kyc_status in LOCKED_KYC_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"KYC verification is already {user.kyc_status.value}. You cannot submit another request.",
        )


def submit(user: UserModel, info: KycPersonalInfo, documents: Mapping[str, str]) -> dict:
    """
    Apply a user's KYC submission and move the record to pending.

    ``documents`` maps a document field (id_proof, address_proof, selfie) to its
    stored web path. Fields missing from it keep whatever was uploaded before.
    Returns the document references now on file.
    """
    ensure_can_submit(user)

    unknown = set(documents) - set(DOCUMENT_FIELDS)
    if unknown:
        raise ValueError(f"Unknown KYC document fields: {', '.join(sorted(unknown))}")

    if info.id_number:
        user.id_number = info.id_number
    if info.birth_date:
        user.birth_date = info.birth_date
    if info.phone:
        user.phone = info.phone

    address = user.address
    address.street = info.street or address.street
    address.city = info.city or address.city
    address.state = info.state or address.state
    address.postal_code = info.postal_code or address.postal_code
    address.country = info.country or address.country

    kyc = user.kyc_documents
    for field, path in documents.items():
        setattr(kyc, field, path)

    kyc.rejection_reason = None
    kyc.resubmission_message = None
    user.kyc_status = KycStatus.PENDING

    logger.info(f"KYC submitted by user {user.id}")
    return {field: getattr(kyc, field) for field in DOCUMENT_FIELDS if getattr(kyc, field)}


def _stamp_review(user: UserModel, reviewer: UserModel, new_status: KycStatus) -> None:
    user.kyc_status = new_status
    user.kyc_documents.reviewed_by = reviewer.id
    user.kyc_documents.reviewed_at = datetime.now(timezone.utc)
    logger.info(f"KYC for user {user.id} set to {new_status.value} by admin {reviewer.id}")


def approve(user: UserModel, reviewer: UserModel) -> None:
    _stamp_review(user, reviewer, KycStatus.APPROVED)


def require_rejection_reason(reason: Optional[str]) -> str:
    if not reason or not reason.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Rejection reason is required")
    return reason.strip()


def reject(user: UserModel, reviewer: UserModel, reason: Optional[str]) -> None:
    reason = require_rejection_reason(reason)
    user.kyc_documents.rejection_reason = reason
    _stamp_review(user, reviewer, KycStatus.REJECTED)


def require_resubmission_message(message: Optional[str]) -> str:
    if not message or not message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Resubmission message is required")
    return message.strip()


def request_resubmission(user: UserModel, reviewer: UserModel, message: Optional[str]) -> None:
    message = require_resubmission_message(message)
    user.kyc_documents.resubmission_message = message
    _stamp_review(user, reviewer, KycStatus.RESUBMISSION_REQUESTED)
