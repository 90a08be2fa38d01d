from __future__ import annotations
from fastapi import APIRouter, Depends
from practice_tracker.schemas.comment import CommentNode
from practice_tracker.services.comment_tree import build_tree
from practice_tracker.upstream import UpstreamClient, get_upstream

router = APIRouter(prefix="/submissions", tags=["submissions"])

@router.get("/{submission_id}/comments", response_model=list[CommentNode])
async def comment_thread(submission_id: str, upstream: UpstreamClient = Depends(get_upstream)):
    sub = await upstream.get_submission(submission_id)
    # embedded comments may omit their submission id
    comments = [c if c.submission_id else c.model_copy(update={"submission_id": sub.id}) for c in sub.comments]
    return build_tree(comments)
