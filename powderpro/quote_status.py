"""
Quote status workflow: labels, progression order, and what each status allows.
"""

import enum


class QuoteStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    IN_PREPARATION = "in_preparation"
    COATING = "coating"
    CURING = "curing"
    QUALITY_CHECK = "quality_check"
    READY_FOR_DELIVERY = "ready_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


STATUS_LABELS = {
    QuoteStatus.DRAFT: "Draft",
    QuoteStatus.PENDING: "Pending Review",
    QuoteStatus.APPROVED: "Approved",
    QuoteStatus.REJECTED: "Rejected",
    QuoteStatus.IN_PREPARATION: "In Preparation",
    QuoteStatus.COATING: "Coating in Progress",
    QuoteStatus.CURING: "Curing",
    QuoteStatus.QUALITY_CHECK: "Quality Check",
    QuoteStatus.READY_FOR_DELIVERY: "Ready for Delivery",
    QuoteStatus.DELIVERED: "Delivered",
    QuoteStatus.COMPLETED: "Completed",
    QuoteStatus.CANCELLED: "Cancelled",
}

# Happy path through the shop. rejected/cancelled are terminal side exits.
STATUS_ORDER = [
    QuoteStatus.DRAFT,
    QuoteStatus.PENDING,
    QuoteStatus.APPROVED,
    QuoteStatus.IN_PREPARATION,
    QuoteStatus.COATING,
    QuoteStatus.CURING,
    QuoteStatus.QUALITY_CHECK,
    QuoteStatus.READY_FOR_DELIVERY,
    QuoteStatus.DELIVERED,
    QuoteStatus.COMPLETED,
]

EDITABLE_STATUSES = {QuoteStatus.DRAFT, QuoteStatus.PENDING}

CANCELLABLE_STATUSES = {
    QuoteStatus.DRAFT,
    QuoteStatus.PENDING,
    QuoteStatus.APPROVED,
    QuoteStatus.IN_PREPARATION,
}


def status_label(status: QuoteStatus) -> str:
    return STATUS_LABELS.get(QuoteStatus(status), str(status))


def is_editable(status: QuoteStatus) -> bool:
    return QuoteStatus(status) in EDITABLE_STATUSES


def is_cancellable(status: QuoteStatus) -> bool:
    return QuoteStatus(status) in CANCELLABLE_STATUSES


def next_status(status: QuoteStatus):
    """Next status along STATUS_ORDER, or None at the end / off the path."""
    status = QuoteStatus(status)
    if status not in STATUS_ORDER:
        return None
    index = STATUS_ORDER.index(status)
    if index == len(STATUS_ORDER) - 1:
        return None
    return STATUS_ORDER[index + 1]


def previous_status(status: QuoteStatus):
    """Previous status along STATUS_ORDER, or None at the start / off the path."""
    status = QuoteStatus(status)
    if status not in STATUS_ORDER:
        return None
    index = STATUS_ORDER.index(status)
    if index == 0:
        return None
    return STATUS_ORDER[index - 1]
