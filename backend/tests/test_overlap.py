from __future__ import annotations
from practice_tracker.schemas.engagement import QuestionStat
from practice_tracker.services.overlap import index_practice_stats, overlap, overlap_report

STATS = [
    QuestionStat(question_number=1, question_title="Two Sum", submission_count=5, unique_user_count=3),
    QuestionStat(question_number=42, question_title="Trapping Rain Water", submission_count=1, unique_user_count=1),
    QuestionStat(question_number=7, question_title="Reverse Integer", submission_count=0, unique_user_count=0),
]


def test_used_question_reports_counts():
    o = overlap(1, STATS)
    assert o.is_used is True
    assert (o.user_count, o.submission_count) == (3, 5)


def test_unknown_question_is_unused():
    o = overlap(999, STATS)
    assert o.is_used is False
    assert o.user_count == 0 and o.submission_count == 0


def test_zero_users_is_not_used():
    assert overlap(7, STATS).is_used is False


def test_unavailable_corpus_degrades_to_unused():
    o = overlap(1, None)
    assert o.is_used is False and o.user_count == 0


def test_keyed_corpus_is_accepted():
    keyed = index_practice_stats(STATS)
    assert overlap(42, keyed).user_count == 1


def test_overlap_report_counts_practiced_questions():
    report = overlap_report([1, 2, 42], STATS)
    assert [o.is_used for o in report.questions] == [True, False, True]
    assert report.practiced_count == 2
    assert report.stats_available is True

    degraded = overlap_report([1, 42], None)
    assert degraded.practiced_count == 0
    assert degraded.stats_available is False
