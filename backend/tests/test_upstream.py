from __future__ import annotations
import httpx, pytest
from practice_tracker.upstream import UpstreamClient, UpstreamError

TASK = {
    "_id": "t1", "title": "Week 1", "deadline": "2024-01-10T00:00:00Z",
    "questions": [{"questionNumber": 1, "title": "Two Sum", "difficulty": "Easy", "url": "https://x/1"}],
    "assignedUsers": [{"_id": "u1", "name": "Ana"}, "u2"],
}


def _client(handler) -> UpstreamClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://upstream/api")
    return UpstreamClient(http)


@pytest.mark.asyncio
async def test_get_task_parses_upstream_shape():
    seen = []

    def handler(request: httpx.Request):
        seen.append(request.url.path)
        return httpx.Response(200, json={"task": TASK})

    task = await _client(handler).get_task("t1")
    assert seen == ["/api/leetcode/tasks/t1"]
    assert task.id == "t1"
    assert task.assigned_users == ["u1", "u2"]
    assert task.questions[0].question_number == 1
    assert task.deadline.tzinfo is not None


@pytest.mark.asyncio
async def test_task_submissions_pass_user_filter():
    def handler(request: httpx.Request):
        assert request.url.params.get("userId") == "u1"
        return httpx.Response(200, json={"submissions": [
            {"_id": "s1", "user": {"_id": "u1", "name": "Ana"}, "questionNumber": 1,
             "createdAt": "2024-01-09T10:00:00Z", "status": "Accepted", "likes": ["u2"]},
        ]})

    subs = await _client(handler).get_task_submissions("t1", user_id="u1")
    assert subs[0].user_id == "u1"
    assert subs[0].status == "accepted"
    assert subs[0].likes == ["u2"]


@pytest.mark.asyncio
async def test_not_found_maps_to_404():
    client = _client(lambda request: httpx.Response(404, json={"message": "nope"}))
    with pytest.raises(UpstreamError) as exc:
        await client.get_submission("missing")
    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_server_error_maps_to_502():
    client = _client(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(UpstreamError) as exc:
        await client.get_users()
    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_malformed_records_map_to_502():
    client = _client(lambda request: httpx.Response(200, json={"submissions": [{"_id": "s1"}]}))
    with pytest.raises(UpstreamError) as exc:
        await client.get_community_practice()
    assert exc.value.status_code == 502


@pytest.mark.asyncio
async def test_practice_stats_parse():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={"stats": [
            {"questionNumber": 1, "questionTitle": "Two Sum", "submissionCount": 4, "userCount": 2},
        ]})

    stats = await _client(handler).get_practice_stats()
    assert stats[0].question_number == 1
    assert stats[0].unique_user_count == 2
    assert stats[0].submission_count == 4


@pytest.mark.asyncio
async def test_practice_stats_null_counts_read_as_zero():
    def handler(request: httpx.Request):
        return httpx.Response(200, json={"stats": [
            {"questionNumber": 1, "questionTitle": "Two Sum", "submissionCount": 4, "userCount": 2},
            {"questionNumber": 7, "questionTitle": "Reverse Integer", "submissionCount": None, "userCount": None},
        ]})

    stats = await _client(handler).get_practice_stats()
    assert [s.question_number for s in stats] == [1, 7]
    assert (stats[1].submission_count, stats[1].unique_user_count) == (0, 0)
    assert stats[0].unique_user_count == 2


@pytest.mark.asyncio
async def test_practice_stats_unavailable_degrades_to_none():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("refused", request=request)

    assert await _client(handler).get_practice_stats() is None
    assert await _client(lambda r: httpx.Response(503)).get_practice_stats() is None


@pytest.mark.asyncio
async def test_task_snapshot_collects_records():
    def handler(request: httpx.Request):
        path = request.url.path
        if path.endswith("/submissions"):
            return httpx.Response(200, json={"submissions": []})
        if path.endswith("/users"):
            return httpx.Response(200, json={"users": [{"_id": "u1", "name": "Ana", "role": "user"}]})
        return httpx.Response(200, json={"task": TASK})

    snap = await _client(handler).task_snapshot("t1")
    assert snap.task.id == "t1"
    assert [u.id for u in snap.users] == ["u1"]
    assert snap.submissions == []
    assert snap.fetched_at.tzinfo is not None


@pytest.mark.asyncio
async def test_dependency_forwards_caller_credentials():
    from starlette.requests import Request
    from practice_tracker.upstream import get_upstream

    request = Request({"type": "http", "method": "GET", "path": "/", "query_string": b"",
                       "headers": [(b"authorization", b"Bearer abc")]})
    request.state.request_id = "rid-1"
    gen = get_upstream(request)
    upstream = await gen.__anext__()
    try:
        assert upstream.http.headers["authorization"] == "Bearer abc"
        assert upstream.http.headers["x-request-id"] == "rid-1"
        assert str(upstream.http.base_url).startswith("http")
    finally:
        await gen.aclose()


def test_render_clock_follows_setting(monkeypatch):
    from datetime import datetime, timezone
    from practice_tracker.config import settings
    from practice_tracker.upstream import Snapshot, render_clock

    fetched = datetime(2024, 1, 1, tzinfo=timezone.utc)
    snap = Snapshot(fetched_at=fetched)
    monkeypatch.setattr(settings, "lateness_clock", "fetch")
    assert render_clock(snap) == fetched
    monkeypatch.setattr(settings, "lateness_clock", "wall")
    assert render_clock(snap) > fetched
