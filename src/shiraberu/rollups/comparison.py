"""Comparison of a report summary against the previous period."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from .aggregator import Summary

__all__ = ["SummaryDiff", "diff_summaries"]


@dataclass(frozen=True)
class SummaryDiff:
    """Signed per-category change versus the previous period.

    ``has_previous`` is False when no previous data could be obtained; the
    deltas are then all zero and must not be rendered. A zero delta with
    ``has_previous`` True means "unchanged".
    """

    opened_diff: int = 0
    draft_diff: int = 0
    merged_diff: int = 0
    reviewed_diff: int = 0
    has_previous: bool = False

    def to_dict(self) -> dict[str, int | bool]:
        return asdict(self)


def diff_summaries(current: Summary, previous: Summary | None) -> SummaryDiff:
    """Compute ``current - previous`` per category.

    Parameters
    ----------
    current
        Summary of the requested period
    previous
        Summary of the previous period, or None when unavailable

    Returns
    -------
    SummaryDiff
        Deltas (may be negative), or an empty diff flagged as having no
        previous data
    """
    if previous is None:
        return SummaryDiff(has_previous=False)

    return SummaryDiff(
        opened_diff=current.opened_count - previous.opened_count,
        draft_diff=current.draft_count - previous.draft_count,
        merged_diff=current.merged_count - previous.merged_count,
        reviewed_diff=current.reviewed_count - previous.reviewed_count,
        has_previous=True,
    )
