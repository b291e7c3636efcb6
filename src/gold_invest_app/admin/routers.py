from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from gold_invest_app.core.base.base import ApiResponse
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.schemas.user_schemas import UserResponse
from gold_invest_app.users.utils.get_current_user import get_current_admin
from gold_invest_app.admin.models import AuditLogModel, AuditSeverity
from gold_invest_app.admin.schemas import AuditLogResponse


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=ApiResponse[List[UserResponse]])
async def get_all_users(
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    current_admin: UserModel = Depends(get_current_admin)
):
    """
    List every registered user, newest first. Without a limit all users are returned.
    """
    query = UserModel.find_all().sort("-created_at").skip(skip)
    if limit:
        query = query.limit(limit)
    users = await query.to_list()
    return ApiResponse(
        count=len(users),
        data=[UserResponse.model_validate(user) for user in users],
    )


@router.get("/audit-logs", response_model=ApiResponse[List[AuditLogResponse]])
async def get_audit_logs(
    limit: int = Query(20, ge=1, le=200),
    skip: int = Query(0, ge=0),
    severity: Optional[AuditSeverity] = None,
    current_admin: UserModel = Depends(get_current_admin)
):
    """
    Retrieve the admin audit trail.
    """
    query = AuditLogModel.find_all()
    if severity:
        query = AuditLogModel.find(AuditLogModel.severity == severity)

    logs = await query.sort("-timestamp").skip(skip).limit(limit).to_list()
    return ApiResponse(
        count=len(logs),
        data=[AuditLogResponse.model_validate(log) for log in logs],
    )
