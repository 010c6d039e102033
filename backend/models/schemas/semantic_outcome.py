"""Result of one semantic (vector-similarity) lookup."""

from pydantic import BaseModel


class SemanticOutcome(BaseModel):
    """Semantic hits keyed by item id, in the order the index ranked them.

    ``degraded`` is set when the lookup was attempted but contributed
    nothing (timeout, unavailable collaborator, malformed response).
    """
    hits: dict[str, float] = {}  # item_id -> similarity in [0, 1]
    degraded: bool = False
    reason: str = "ok"  # ok, skipped, timeout, unavailable, malformed

    @classmethod
    def skipped(cls) -> "SemanticOutcome":
        return cls(reason="skipped")

    @classmethod
    def failed(cls, reason: str) -> "SemanticOutcome":
        return cls(degraded=True, reason=reason)
