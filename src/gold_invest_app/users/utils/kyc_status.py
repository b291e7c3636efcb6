from enum import Enum


class KycStatus(str, Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    RESUBMISSION_REQUESTED = "resubmission_requested"


# A new submission is refused while one is under review or after approval
LOCKED_KYC_STATUSES = frozenset({KycStatus.PENDING, KycStatus.APPROVED})
