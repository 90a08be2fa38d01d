from __future__ import annotations
from typing import Iterable, Mapping, Union
from practice_tracker.schemas.engagement import OverlapReport, PracticeOverlap, QuestionStat

PracticeCorpus = Union[Iterable[QuestionStat], Mapping[int, QuestionStat], None]


def index_practice_stats(corpus: PracticeCorpus) -> dict[int, QuestionStat]:
    if corpus is None:
        return {}
    if isinstance(corpus, Mapping):
        return dict(corpus)
    # repeated question numbers: last one wins
    return {st.question_number: st for st in corpus}


def overlap(question_number: int, corpus: PracticeCorpus) -> PracticeOverlap:
    """
    How much a candidate task question was already practiced.

    Advisory only: a used question is still allowed in a task. `corpus=None` stands for
    practice stats that could not be loaded and reports the question as unused.
    """
    index = corpus if isinstance(corpus, dict) else index_practice_stats(corpus)
    st = index.get(question_number)
    users = st.unique_user_count if st else 0
    return PracticeOverlap(
        question_number=question_number,
        is_used=users > 0,
        user_count=users,
        submission_count=st.submission_count if st else 0,
    )


def overlap_report(question_numbers: Iterable[int], corpus: PracticeCorpus) -> OverlapReport:
    index = index_practice_stats(corpus)
    items = [overlap(qn, index) for qn in question_numbers]
    return OverlapReport(
        questions=items,
        practiced_count=sum(1 for o in items if o.is_used),
        stats_available=corpus is not None,
    )
