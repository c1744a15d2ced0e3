"""Notification-related enumerations."""

from enum import Enum


class NotificationType(str, Enum):
    """Kinds of notification the backend delivers.

    The set is closed: the backend never sends a type outside this list.
    """

    # Contract events
    CONTRACT_INVITATION = "contract_invitation"
    CONTRACT_ACCEPTED = "contract_accepted"
    CONTRACT_REJECTED = "contract_rejected"
    CONTRACT_COMPLETED = "contract_completed"
    CONTRACT_UPDATED = "contract_updated"

    # Milestone events
    MILESTONE_SUBMITTED = "milestone_submitted"
    MILESTONE_APPROVED = "milestone_approved"
    MILESTONE_REJECTED = "milestone_rejected"
    MILESTONE_PAID = "milestone_paid"

    # Payment events
    PAYMENT_RECEIPT = "payment_receipt"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_DELAYED = "payment_delayed"

    # Withdrawal events
    WITHDRAWAL_REQUESTED = "withdrawal_requested"
    WITHDRAWAL_PROCESSING = "withdrawal_processing"
    WITHDRAWAL_COMPLETED = "withdrawal_completed"
    WITHDRAWAL_REJECTED = "withdrawal_rejected"

    # System events
    SYSTEM_ANNOUNCEMENT = "system_announcement"
