from __future__ import annotations
from collections import defaultdict
import unicodedata
from typing import Iterable
from practice_tracker.schemas.engagement import LeaderboardEntry, QuestionGroup, QuestionStat, SortKey
from practice_tracker.schemas.submission import Submission
from practice_tracker.schemas.user import UserRef
from practice_tracker.services.status import as_instant

# ---------- community feed: filter then sort ----------

def _name_key(name: str | None) -> tuple[str, str]:
    """Collation key for display names: accents and case ignored first, then case-folded text as tie-break."""
    folded = (name or "").casefold()
    base = "".join(ch for ch in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(ch))
    return base, folded


def _matches(s: Submission, needle: str) -> bool:
    name = s.user.name if s.user else ""
    return (
        needle in (s.question_title or "").casefold()
        or needle in str(s.question_number)
        or needle in (name or "").casefold()
    )


def filter_submissions(
    submissions: Iterable[Submission],
    search: str | None = None,
    user_id: str | None = None,
) -> list[Submission]:
    """Case-insensitive substring search over question title, question number and submitter name, then by user."""
    out = list(submissions)
    if search:
        needle = search.strip().casefold()
        if needle:
            out = [s for s in out if _matches(s, needle)]
    if user_id:
        out = [s for s in out if s.user_id == user_id]
    return out


def sort_submissions(submissions: Iterable[Submission], sort_by: SortKey = "recent") -> list[Submission]:
    subs = list(submissions)
    if sort_by == "recent":
        return sorted(subs, key=lambda s: as_instant(s.created_at), reverse=True)
    if sort_by == "popular":
        return sorted(subs, key=lambda s: len(s.likes), reverse=True)
    if sort_by == "question":
        return sorted(subs, key=lambda s: s.question_number)
    if sort_by == "user":
        return sorted(subs, key=lambda s: _name_key(s.user.name if s.user else None))
    return subs


def browse(
    submissions: Iterable[Submission],
    search: str | None = None,
    user_id: str | None = None,
    sort_by: SortKey = "recent",
) -> list[Submission]:
    return sort_submissions(filter_submissions(submissions, search, user_id), sort_by)

# ---------- aggregates ----------

def _practice(submissions: Iterable[Submission], practice_only: bool) -> list[Submission]:
    return [s for s in submissions if s.is_personal_practice or not practice_only]


def question_stats(submissions: Iterable[Submission], practice_only: bool = True) -> list[QuestionStat]:
    """Attempts and distinct solvers per question, most attempted first (ties keep first appearance)."""
    titles: dict[int, str] = {}
    counts: dict[int, int] = defaultdict(int)
    solvers: dict[int, set[str]] = defaultdict(set)
    for s in _practice(submissions, practice_only):
        qn = s.question_number
        titles.setdefault(qn, s.question_title)
        counts[qn] += 1
        if s.user_id is not None:
            solvers[qn].add(s.user_id)
    stats = [
        QuestionStat(question_number=qn, question_title=title, submission_count=counts[qn],
                     unique_user_count=len(solvers[qn]))
        for qn, title in titles.items()
    ]
    return sorted(stats, key=lambda st: st.submission_count, reverse=True)


def leaderboard(
    submissions: Iterable[Submission],
    practice_only: bool = True,
    limit: int | None = None,
) -> list[LeaderboardEntry]:
    """
    Per-user totals ranked by distinct questions solved.

    Submissions without a user are skipped. Users with equal `unique_question_count` keep
    the order in which they first appear in `submissions`, so the ranking is reproducible.
    """
    refs: dict[str, UserRef] = {}
    subs: dict[str, int] = defaultdict(int)
    likes: dict[str, int] = defaultdict(int)
    questions: dict[str, set[int]] = defaultdict(set)
    for s in _practice(submissions, practice_only):
        uid = s.user_id
        if uid is None:
            continue
        refs.setdefault(uid, s.user)
        subs[uid] += 1
        likes[uid] += len(s.likes)
        questions[uid].add(s.question_number)

    ranked = sorted(refs, key=lambda uid: len(questions[uid]), reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [
        LeaderboardEntry(
            rank=idx + 1,
            user=refs[uid],
            submission_count=subs[uid],
            total_likes_received=likes[uid],
            unique_question_count=len(questions[uid]),
        )
        for idx, uid in enumerate(ranked)
    ]


def group_by_question(submissions: Iterable[Submission]) -> list[QuestionGroup]:
    """A user's practice history: one group per question, newest attempt first, groups by latest activity."""
    groups: dict[int, list[Submission]] = defaultdict(list)
    for s in submissions:
        groups[s.question_number].append(s)
    out = []
    for qn, items in groups.items():
        items = sorted(items, key=lambda s: as_instant(s.created_at), reverse=True)
        out.append(QuestionGroup(question_number=qn, question_title=items[0].question_title, submissions=items))
    return sorted(out, key=lambda g: as_instant(g.submissions[0].created_at), reverse=True)
