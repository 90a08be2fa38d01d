from __future__ import annotations
from typing import Iterable
import structlog
from practice_tracker.schemas.comment import Comment, CommentNode

log = structlog.get_logger()


def _newest_first(nodes: list[CommentNode]) -> list[CommentNode]:
    return sorted(nodes, key=lambda n: n.created_at, reverse=True)


def _would_cycle(child_id: str, parent_id: str, attached_parent: dict[str, str]) -> bool:
    """True if `child_id` already sits on the attached ancestor chain of `parent_id`."""
    cur: str | None = parent_id
    seen: set[str] = set()
    while cur is not None and cur not in seen:
        if cur == child_id:
            return True
        seen.add(cur)
        cur = attached_parent.get(cur)
    return False


def build_tree(comments: Iterable[Comment]) -> list[CommentNode]:
    """
    Rebuild the reply forest of a flat comment list.

    Each comment is attached under `parent_comment_id` when that parent is present in the
    input, belongs to the same submission, and the attachment would not make the comment
    its own ancestor. Every other comment becomes a root, so no input comment is lost.
    Roots and every `replies` list are ordered newest first, independently per level.

    The input comments are copied into `CommentNode`s and left untouched.
    """
    nodes: dict[str, CommentNode] = {}
    order: list[tuple[CommentNode, bool]] = []
    for c in comments:
        node = CommentNode.model_validate(c.model_dump(exclude={"replies", "replies_count"}))
        first = node.id not in nodes
        if first:
            nodes[node.id] = node
        else:
            log.warning("comment_duplicate_id", comment_id=node.id)
        order.append((node, first))

    attached_parent: dict[str, str] = {}
    roots: list[CommentNode] = []
    for node, first in order:
        pid = node.parent_comment_id
        if pid is None or not first:
            # a repeated id can only be shown as a root
            roots.append(node)
            continue
        parent = nodes.get(pid)
        if parent is None:
            log.warning("comment_parent_missing", comment_id=node.id, parent_id=pid)
            roots.append(node)
            continue
        if parent.submission_id and node.submission_id and parent.submission_id != node.submission_id:
            log.warning("comment_parent_other_submission", comment_id=node.id, parent_id=pid,
                        submission_id=node.submission_id, parent_submission_id=parent.submission_id)
            roots.append(node)
            continue
        if _would_cycle(node.id, pid, attached_parent):
            log.warning("comment_parent_cycle", comment_id=node.id, parent_id=pid)
            roots.append(node)
            continue
        attached_parent[node.id] = pid
        parent.replies.append(node)

    for node, _ in order:
        node.replies = _newest_first(node.replies)
        node.replies_count = len(node.replies)
    return _newest_first(roots)


def count_nodes(forest: list[CommentNode]) -> int:
    total = 0
    stack = list(forest)
    while stack:
        node = stack.pop()
        total += 1
        stack.extend(node.replies)
    return total
