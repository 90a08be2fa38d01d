from __future__ import annotations
from fastapi import APIRouter, Depends, Query
from practice_tracker.config import settings
from practice_tracker.schemas.engagement import (
    LeaderboardEntry, OverlapReport, QuestionGroup, QuestionStat, SortKey,
)
from practice_tracker.schemas.submission import Submission
from practice_tracker.services.engagement import browse, group_by_question, leaderboard, question_stats
from practice_tracker.services.overlap import overlap_report
from practice_tracker.upstream import UpstreamClient, get_upstream

router = APIRouter(prefix="/community", tags=["community"])

@router.get("/submissions", response_model=list[Submission])
async def community_submissions(
    search: str | None = Query(default=None),
    user_id: str | None = Query(default=None),
    sort: SortKey = Query(default="recent"),
    upstream: UpstreamClient = Depends(get_upstream),
):
    subs = await upstream.get_community_practice()
    return browse(subs, search=search, user_id=user_id, sort_by=sort)

@router.get("/question-stats", response_model=list[QuestionStat])
async def community_question_stats(upstream: UpstreamClient = Depends(get_upstream)):
    return question_stats(await upstream.get_community_practice())

@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def community_leaderboard(
    limit: int = Query(default=settings.leaderboard_limit, ge=1, le=500),
    upstream: UpstreamClient = Depends(get_upstream),
):
    return leaderboard(await upstream.get_community_practice(), limit=limit)

@router.get("/users/{user_id}/practice", response_model=list[QuestionGroup])
async def user_practice(user_id: str, upstream: UpstreamClient = Depends(get_upstream)):
    subs = await upstream.get_community_practice()
    return group_by_question(s for s in subs if s.user_id == user_id)

@router.get("/overlap", response_model=OverlapReport)
async def practice_overlap(
    question: list[int] = Query(default=[]),
    upstream: UpstreamClient = Depends(get_upstream),
):
    # stats failing to load degrade to "nothing practiced"; task creation is never blocked
    stats = await upstream.get_practice_stats()
    return overlap_report(question, stats)
