"""
Attempt numbering for ingestion logs.

Every applied status event is recorded under an attempt number. A new
attempt begins only when ingestion is started again after the previous
attempt reached a terminal state.

Dependencies: docingest.boundary.db.models
System role: Pure domain rule shared by the orchestrator and its tests
"""

from docingest.boundary.db.models import AttemptLogModel, IngestionStatus


def next_attempt_id(latest: AttemptLogModel | None, status: IngestionStatus) -> int:
    """
    Compute the attempt number for an incoming status event.

    Args:
        latest: Most recent log row for the document, or None
        status: Status carried by the incoming event

    Returns:
        int: 1 for a document without history, latest + 1 when a terminal
        attempt is restarted, otherwise the latest attempt number
    """
    if latest is None:
        return 1
    if status == IngestionStatus.STARTED and latest.status.is_terminal:
        return latest.attempt_id + 1
    return latest.attempt_id
