from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from practice_tracker.schemas.submission import DisplayStatus, Submission


def as_instant(value: datetime | None) -> datetime | None:
    """Attach UTC to naive instants so they compare with aware ones. No offset shifting is done."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=dt_tz.utc)


def is_late(submission: Submission, deadline: datetime | None) -> bool:
    """Lateness is strict: a submission made exactly at the deadline is on time."""
    if deadline is None:
        return False
    return as_instant(submission.created_at) > as_instant(deadline)


def classify(submission: Submission, deadline: datetime | None) -> DisplayStatus:
    """
    Derive the deadline-aware display status from the author-reported status.

    Precedence: rejected > late > raw status. The stored status is never modified.

    Examples:
        accepted at 09:00, deadline 10:00  -> "accepted"
        pending  at 10:00, deadline 10:00  -> "pending"   (equal is on time)
        accepted at 10:01, deadline 10:00  -> "late"
        rejected at 10:01, deadline 10:00  -> "rejected"
    """
    if submission.status == "rejected":
        return "rejected"
    if is_late(submission, deadline):
        return "late"
    return submission.status


def absent_status(deadline: datetime | None, now: datetime) -> DisplayStatus | None:
    """Status for a (user, question) pair with no submission: missing once due, otherwise no badge."""
    if deadline is None:
        return None
    return "missing" if as_instant(now) > as_instant(deadline) else None


def latest(submissions: list[Submission]) -> Submission | None:
    # ties on created_at resolve to the later record in input order (a resubmission)
    best = None
    for s in submissions:
        if best is None or as_instant(s.created_at) >= as_instant(best.created_at):
            best = s
    return best
