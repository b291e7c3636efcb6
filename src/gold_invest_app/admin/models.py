from enum import Enum
from typing import Optional
from datetime import datetime, timezone
from uuid import UUID
from pydantic import Field
from pymongo import DESCENDING, IndexModel
from gold_invest_app.core.base.base import BaseCollection


class AuditSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AuditLogModel(BaseCollection):
    """
    Log of administrative actions (KYC decisions).
    """
    actor_id: UUID
    actor_email: str
    action: str  # e.g. "Approved KYC", "Rejected KYC"
    target: str  # reviewed user's email
    severity: AuditSeverity = AuditSeverity.LOW
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "audit_logs"
        indexes = [IndexModel([("timestamp", DESCENDING)])]
