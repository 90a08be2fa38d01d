from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_tz
from typing import Any, AsyncGenerator
import httpx
import structlog
from fastapi import Request
from pydantic import ValidationError
from practice_tracker.config import settings
from practice_tracker.schemas.engagement import QuestionStat
from practice_tracker.schemas.submission import Submission
from practice_tracker.schemas.task import Task
from practice_tracker.schemas.user import User

log = structlog.get_logger()


class UpstreamError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


@dataclass
class Snapshot:
    """Records fetched together for one view render, stamped with the fetch time."""

    fetched_at: datetime
    task: Task | None = None
    users: list[User] = field(default_factory=list)
    submissions: list[Submission] = field(default_factory=list)


class UpstreamClient:
    """Read-only access to the records API. Every call is one GET; nothing is cached."""

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def _get(self, path: str, params: dict | None = None) -> dict[str, Any]:
        try:
            resp = await self.http.get(path, params=params)
        except httpx.HTTPError as e:
            log.warning("upstream_unreachable", path=path, error=str(e))
            raise UpstreamError(502, f"Upstream unreachable: {path}") from e
        if resp.status_code == 404:
            raise UpstreamError(404, f"Not found upstream: {path}")
        if resp.status_code >= 400:
            log.warning("upstream_error", path=path, status=resp.status_code)
            raise UpstreamError(502, f"Upstream returned {resp.status_code} for {path}")
        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(502, f"Upstream sent invalid JSON for {path}") from e
        return data if isinstance(data, dict) else {"items": data}

    @staticmethod
    def _parse(model, items: Any, path: str) -> list:
        try:
            return [model.model_validate(it) for it in (items or [])]
        except ValidationError as e:
            log.warning("upstream_invalid_records", path=path, errors=e.error_count())
            raise UpstreamError(502, f"Upstream sent malformed records for {path}") from e

    async def get_task(self, task_id: str) -> Task:
        path = f"/leetcode/tasks/{task_id}"
        data = await self._get(path)
        return self._parse(Task, [data.get("task") or data], path)[0]

    async def list_tasks(self, include_inactive: bool = False) -> list[Task]:
        path = "/leetcode/tasks"
        data = await self._get(path, params={"includeDeleted": "true"} if include_inactive else None)
        return self._parse(Task, data.get("tasks", data.get("items")), path)

    async def get_task_submissions(self, task_id: str, user_id: str | None = None) -> list[Submission]:
        path = f"/leetcode/tasks/{task_id}/submissions"
        data = await self._get(path, params={"userId": user_id} if user_id else None)
        return self._parse(Submission, data.get("submissions"), path)

    async def get_users(self) -> list[User]:
        data = await self._get("/users")
        return self._parse(User, data.get("users"), "/users")

    async def get_submission(self, submission_id: str) -> Submission:
        path = f"/leetcode/submissions/{submission_id}"
        data = await self._get(path)
        return self._parse(Submission, [data.get("submission") or data], path)[0]

    async def get_community_practice(self) -> list[Submission]:
        path = "/leetcode/community-practice"
        data = await self._get(path)
        return self._parse(Submission, data.get("submissions"), path)

    async def get_practice_stats(self) -> list[QuestionStat] | None:
        """Per-question practice stats, or None when they cannot be loaded (callers treat that as unknown)."""
        path = "/leetcode/practice-stats"
        try:
            data = await self._get(path)
            return [
                QuestionStat(
                    question_number=st["questionNumber"],
                    question_title=st.get("questionTitle") or "",
                    submission_count=st.get("submissionCount") or 0,
                    unique_user_count=st.get("userCount") or st.get("uniqueUserCount") or 0,
                )
                for st in data.get("stats") or []
            ]
        except (UpstreamError, KeyError, TypeError, ValidationError) as e:
            log.warning("practice_stats_unavailable", error=str(e))
            return None

    async def task_snapshot(self, task_id: str) -> Snapshot:
        task = await self.get_task(task_id)
        users = await self.get_users()
        subs = await self.get_task_submissions(task_id)
        return Snapshot(fetched_at=datetime.now(dt_tz.utc), task=task, users=users, submissions=subs)


def render_clock(snapshot: Snapshot) -> datetime:
    """Instant against which "deadline passed" is judged for a snapshot."""
    if settings.lateness_clock == "wall":
        return datetime.now(dt_tz.utc)
    return snapshot.fetched_at


async def get_upstream(request: Request) -> AsyncGenerator[UpstreamClient, None]:
    # forward the caller's credentials unchanged; this service never inspects them
    headers = {}
    auth = request.headers.get("authorization")
    if auth:
        headers["Authorization"] = auth
    rid = getattr(request.state, "request_id", None)
    if rid:
        headers["X-Request-ID"] = rid
    async with httpx.AsyncClient(
        base_url=settings.upstream_api_url,
        headers=headers,
        timeout=settings.upstream_timeout_seconds,
    ) as http:
        yield UpstreamClient(http)
