from __future__ import annotations
from datetime import datetime, timedelta, timezone
import pytest
from practice_tracker.schemas.comment import Comment, CommentNode
from practice_tracker.services.comment_tree import build_tree, count_nodes

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _c(cid, parent=None, minutes=0, submission="s1"):
    return Comment(id=str(cid), submission_id=submission, text=f"comment {cid}",
                   parent_comment_id=None if parent is None else str(parent),
                   created_at=T0 + timedelta(minutes=minutes))


def _ids(nodes):
    return [n.id for n in nodes]


def _assert_newest_first(nodes: list[CommentNode]):
    stamps = [n.created_at for n in nodes]
    assert stamps == sorted(stamps, reverse=True)
    for n in nodes:
        _assert_newest_first(n.replies)


def test_scenario_nested_chain_and_orphan():
    """parent 99 does not exist, so comment 4 is demoted to root"""
    comments = [_c(1, minutes=0), _c(2, 1, minutes=1), _c(3, 2, minutes=2), _c(4, 99, minutes=3)]
    tree = build_tree(comments)

    assert sorted(_ids(tree)) == ["1", "4"]
    one = next(n for n in tree if n.id == "1")
    assert _ids(one.replies) == ["2"]
    assert _ids(one.replies[0].replies) == ["3"]
    assert one.replies_count == 1
    assert count_nodes(tree) == 4


def test_roots_and_replies_sorted_newest_first():
    comments = [
        _c("a", minutes=0), _c("b", minutes=5), _c("c", minutes=2),
        _c("a1", "a", minutes=1), _c("a2", "a", minutes=9), _c("a3", "a", minutes=4),
    ]
    tree = build_tree(comments)
    assert _ids(tree) == ["b", "c", "a"]
    assert _ids(tree[2].replies) == ["a2", "a3", "a1"]
    _assert_newest_first(tree)


def test_two_comment_cycle_terminates_and_keeps_both():
    comments = [_c("A", "B", minutes=1), _c("B", "A", minutes=0)]
    tree = build_tree(comments)
    assert count_nodes(tree) == 2
    assert len(tree) >= 1
    # A is attached first, so B is refused as A's descendant and becomes the root
    assert _ids(tree) == ["B"]
    assert _ids(tree[0].replies) == ["A"]


def test_self_parent_becomes_root():
    tree = build_tree([_c("x", "x")])
    assert _ids(tree) == ["x"]
    assert tree[0].replies == []


def test_longer_cycle_is_broken():
    comments = [_c(1, 3, minutes=1), _c(2, 1, minutes=2), _c(3, 2, minutes=3)]
    tree = build_tree(comments)
    assert count_nodes(tree) == 3
    assert len(tree) == 1


def test_parent_on_other_submission_is_demoted():
    comments = [_c(1, submission="s1"), _c(2, 1, minutes=1, submission="s2")]
    tree = build_tree(comments)
    assert sorted(_ids(tree)) == ["1", "2"]


def test_duplicate_ids_are_all_kept():
    comments = [_c(1, minutes=0), _c(1, minutes=1), _c(2, 1, minutes=2)]
    tree = build_tree(comments)
    assert count_nodes(tree) == 3


def test_input_is_not_mutated():
    comments = [_c(1), _c(2, 1, minutes=1)]
    before = [c.model_dump() for c in comments]
    build_tree(comments)
    assert [c.model_dump() for c in comments] == before


@pytest.mark.parametrize("n", [0, 1, 50])
def test_completeness_for_random_parent_links(n):
    comments = [_c(i, parent=(i * 7) % (n + 3) if i % 3 else None, minutes=i % 11) for i in range(n)]
    tree = build_tree(comments)
    assert count_nodes(tree) == n
    _assert_newest_first(tree)


def test_deep_chain():
    comments = [_c(0)] + [_c(i, i - 1, minutes=i) for i in range(1, 300)]
    tree = build_tree(comments)
    assert _ids(tree) == ["0"]
    assert count_nodes(tree) == 300


def test_upstream_shape_is_accepted():
    raw = {"_id": "c9", "submissionId": "s1", "user": {"_id": "u1", "name": "Ana"}, "text": "hi",
           "parentCommentId": None, "likes": None, "isEdited": True, "createdAt": "2024-03-01T12:00:00Z"}
    tree = build_tree([Comment.model_validate(raw)])
    assert tree[0].id == "c9" and tree[0].user.name == "Ana" and tree[0].likes == []
    dumped = tree[0].model_dump(by_alias=True)
    assert "parentCommentId" in dumped and "repliesCount" in dumped
