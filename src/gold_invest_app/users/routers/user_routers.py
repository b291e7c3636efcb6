from fastapi import APIRouter, Body, HTTPException, status, Depends, File, Form, UploadFile
from uuid import UUID
from typing import List, Optional
from datetime import datetime
from gold_invest_app.core.base.base import ApiResponse
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.schemas.user_schemas import (
    UserResponse, ProfileUpdateRequest, PasswordChangeRequest,
    KycRejectRequest, KycResubmitRequest, KycSubmissionResponse, KycReviewResponse
)
from gold_invest_app.users.utils.get_current_user import get_current_user, get_current_admin
from gold_invest_app.users.utils.kyc_status import KycStatus
from gold_invest_app.users.utils.kyc_storage import save_kyc_files
from gold_invest_app.users.utils.password import hash_password, verify_password
from gold_invest_app.users.utils import kyc_workflow
from gold_invest_app.admin.models import AuditSeverity
from gold_invest_app.admin.utils import log_admin_action


# Define the router for User Management
user_router = APIRouter(prefix="/users", tags=["Users"])


@user_router.get("/profile", response_model=ApiResponse[UserResponse])
async def get_profile(current_user: UserModel = Depends(get_current_user)):
    return ApiResponse(data=UserResponse.model_validate(current_user))


@user_router.put("/profile", response_model=ApiResponse[UserResponse])
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: UserModel = Depends(get_current_user)
):
    """
    Update the current user's name, phone and address.
    Empty values leave the stored value untouched.
    """
    if data.first_name:
        current_user.first_name = data.first_name
    if data.last_name:
        current_user.last_name = data.last_name
    if data.phone:
        current_user.phone = data.phone
    if data.address:
        for key, value in data.address.model_dump(exclude_unset=True).items():
            setattr(current_user.address, key, value)

    await current_user.save()
    return ApiResponse(data=UserResponse.model_validate(current_user))


@user_router.put("/password", response_model=ApiResponse[None])
async def change_password(
    data: PasswordChangeRequest,
    current_user: UserModel = Depends(get_current_user)
):
    if not verify_password(data.current_password, current_user.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    current_user.password = hash_password(data.new_password)
    await current_user.save()
    return ApiResponse(message="Password updated successfully")


@user_router.post("/kyc", response_model=ApiResponse[KycSubmissionResponse])
async def submit_kyc(
    id_proof: Optional[UploadFile] = File(None, alias="idProof"),
    address_proof: Optional[UploadFile] = File(None, alias="addressProof"),
    selfie: Optional[UploadFile] = File(None),
    id_number: Optional[str] = Form(None, alias="idNumber"),
    birth_date: Optional[datetime] = Form(None, alias="birthDate"),
    phone: Optional[str] = Form(None),
    street: Optional[str] = Form(None),
    city: Optional[str] = Form(None),
    state: Optional[str] = Form(None),
    postal_code: Optional[str] = Form(None, alias="postalCode"),
    country: Optional[str] = Form(None),
    current_user: UserModel = Depends(get_current_user)
):
    # Refuse before touching the disk
    kyc_workflow.ensure_can_submit(current_user)

    documents = save_kyc_files(current_user.id, {
        "id_proof": id_proof,
        "address_proof": address_proof,
        "selfie": selfie,
    })
    info = kyc_workflow.KycPersonalInfo(
        id_number=id_number,
        birth_date=birth_date,
        phone=phone,
        street=street,
        city=city,
        state=state,
        postal_code=postal_code,
        country=country,
    )
    on_file = kyc_workflow.submit(current_user, info, documents)
    await current_user.save()

    return ApiResponse(
        message="KYC documents submitted successfully",
        data=KycSubmissionResponse(kyc_status=current_user.kyc_status, documents=on_file),
    )


# ==========================================
#               ADMIN ENDPOINTS
# ==========================================

@user_router.get("/kyc/pending", response_model=ApiResponse[List[UserResponse]])
async def get_kyc_pending_users(current_admin: UserModel = Depends(get_current_admin)):
    users = await UserModel.find(UserModel.kyc_status == KycStatus.PENDING).sort("created_at").to_list()
    return ApiResponse(
        count=len(users),
        data=[UserResponse.model_validate(user) for user in users],
    )


async def _get_user_or_404(user_id: UUID) -> UserModel:
    user = await UserModel.get(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _review_payload(user: UserModel) -> KycReviewResponse:
    return KycReviewResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        kyc_status=user.kyc_status,
        rejection_reason=user.kyc_documents.rejection_reason,
        resubmission_message=user.kyc_documents.resubmission_message,
    )


@user_router.put("/kyc/{user_id}/approve", response_model=ApiResponse[KycReviewResponse])
async def approve_kyc(user_id: UUID, current_admin: UserModel = Depends(get_current_admin)):
    user = await _get_user_or_404(user_id)

    kyc_workflow.approve(user, current_admin)
    await user.save()

    await log_admin_action(
        actor=current_admin,
        action="Approved KYC",
        target=user.email,
        severity=AuditSeverity.MEDIUM,
    )
    return ApiResponse(message="KYC approved successfully", data=_review_payload(user))


@user_router.put("/kyc/{user_id}/reject", response_model=ApiResponse[KycReviewResponse])
async def reject_kyc(
    user_id: UUID,
    data: Optional[KycRejectRequest] = Body(None),
    current_admin: UserModel = Depends(get_current_admin)
):
    reason = kyc_workflow.require_rejection_reason(data.rejection_reason if data else None)
    user = await _get_user_or_404(user_id)

    kyc_workflow.reject(user, current_admin, reason)
    await user.save()

    await log_admin_action(
        actor=current_admin,
        action="Rejected KYC",
        target=user.email,
        severity=AuditSeverity.MEDIUM,
        details=f"Reason: {reason}",
    )
    return ApiResponse(message="KYC rejected successfully", data=_review_payload(user))


@user_router.put("/kyc/{user_id}/resubmit", response_model=ApiResponse[KycReviewResponse])
async def request_kyc_resubmission(
    user_id: UUID,
    data: Optional[KycResubmitRequest] = Body(None),
    current_admin: UserModel = Depends(get_current_admin)
):
    message = kyc_workflow.require_resubmission_message(data.resubmission_message if data else None)
    user = await _get_user_or_404(user_id)

    kyc_workflow.request_resubmission(user, current_admin, message)
    await user.save()

    await log_admin_action(
        actor=current_admin,
        action="Requested KYC resubmission",
        target=user.email,
        severity=AuditSeverity.LOW,
        details=f"Message: {message}",
    )
    return ApiResponse(message="KYC resubmission requested successfully", data=_review_payload(user))
