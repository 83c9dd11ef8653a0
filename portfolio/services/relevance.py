"""Related-content ranking for projects and blog posts."""

from typing import Callable, Iterable, Sequence, TypeVar

T = TypeVar("T")


def relevance_score(candidate_tags: Iterable[str], reference_tags: Iterable[str]) -> int:
    """Count candidate tags that also appear on the reference.

    Repeated tags on the candidate count every time they appear.
    """
    reference = set(reference_tags)
    return sum(1 for tag in candidate_tags if tag in reference)


def rank_related(
    candidates: Sequence[T],
    reference_tags: Iterable[str],
    tags_of: Callable[[T], Iterable[str]],
    limit: int = 3,
    keep_zero: bool = True,
) -> list[T]:
    """Order ``candidates`` by overlap with ``reference_tags`` and keep ``limit``.

    The sort is stable, so equal scores keep the pool's order (recency from
    the store query). With ``keep_zero=False`` candidates sharing no tag are
    dropped instead of filling the tail.
    """
    reference = list(reference_tags)
    scored = [(relevance_score(tags_of(c), reference), c) for c in candidates]
    if not keep_zero:
        scored = [(score, c) for score, c in scored if score > 0]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [c for _, c in scored[: max(limit, 0)]]
