import logging
from typing import Optional
from gold_invest_app.admin.models import AuditLogModel, AuditSeverity
from gold_invest_app.users.models.user_models import UserModel

logger = logging.getLogger(__name__)


async def log_admin_action(
    actor: UserModel,
    action: str,
    target: str,
    severity: AuditSeverity = AuditSeverity.LOW,
    details: Optional[str] = None
) -> AuditLogModel:
    """
    Record a review decision taken by ``actor`` against ``target`` (an email).
    """
    entry = await AuditLogModel(
        actor_id=actor.id,
        actor_email=actor.email,
        action=action,
        target=target,
        severity=severity,
        details=details,
    ).insert()
    logger.info(f"Admin {actor.email}: {action} ({target})")
    return entry
