from collections import Counter
from typing import Dict, Iterable, List, Optional

GRADE_BUCKETS = ["0-10", "11-20", "21-30", "31-40", "41-50", "51-60", "61-70", "71-80", "81-90", "91-100"]


def grade_bucket(score: float) -> str:
    """
    The first bucket whose upper bound is at least the score. Anything
    above 90 lands in ``91-100``.
    """
    for upper, label in zip(range(10, 100, 10), GRADE_BUCKETS):
        if score <= upper:
            return label
    return GRADE_BUCKETS[-1]


def grade_distribution(scores: Iterable[Optional[float]]) -> List[Dict]:
    counts = Counter(grade_bucket(score) for score in scores if score is not None)
    return [{"range": label, "count": counts[label]} for label in sorted(counts)]


def average_score(scores: Iterable[Optional[float]]) -> float:
    scores = [score for score in scores if score is not None]
    if not scores:
        return 0
    return round(sum(scores) / len(scores), 2)


def count_by_month(timestamps: Iterable[Optional[str]]) -> List[Dict]:
    """Group ISO timestamps into ``{year, month, count}`` rows, oldest first."""
    counts = Counter(
        (int(timestamp[0:4]), int(timestamp[5:7]))
        for timestamp in timestamps
        if timestamp
    )
    return [
        {"year": year, "month": month, "count": count}
        for (year, month), count in sorted(counts.items())
    ]
