"""Ranker: order match records by score and keep the top N."""

from typing import Mapping

from models.schemas.match_record import MatchRecord


def rank(records: Mapping[str, MatchRecord], top_n: int = 20) -> list[MatchRecord]:
    """Sort by descending score and truncate.

    Records are keyed by item id, so an item can only appear once. The sort
    is stable: ties keep the order the records were produced in.
    """
    ordered = sorted(records.values(), key=lambda r: r.match_score, reverse=True)
    return ordered[:max(top_n, 0)]
