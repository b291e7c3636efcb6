from datetime import datetime
from typing import Optional
from uuid import UUID
from gold_invest_app.admin.models import AuditSeverity
from gold_invest_app.core.base.base import BaseResponse


class AuditLogResponse(BaseResponse):
    actor_id: UUID
    actor_email: str
    action: str
    target: str
    severity: AuditSeverity
    details: Optional[str] = None
    timestamp: datetime
