"""In-process vector-similarity index over catalog items.

Items are embedded once with JobBERT-v2 (sentence-transformers). When the
model cannot be loaded, or ``backend="tfidf"`` is requested, a TF-IDF
vectorizer fitted on the catalog text is used instead. Queries run in a
worker thread so the engine can race them against its deadline.
"""

import asyncio
import logging
from typing import Iterable

import numpy as np

from models.schemas.catalog_item import CatalogItem
from models.schemas.enums import ItemKind
from services import similarity
from services.collaborators import SimilarityIndex, SimilarityIndexError

logger = logging.getLogger(__name__)


def job_text(item: CatalogItem) -> str:
    parts = [
        f"Job Title: {item.title}",
        f"Company: {item.company}",
        f"Required Skills: {', '.join(item.attributes)}",
        f"Experience Level: {item.experience_level.value if item.experience_level else ''}",
        f"Career Track: {item.track or ''}",
        f"Job Type: {item.job_type}",
        f"Location: {item.location}",
    ]
    return ". ".join(parts)


def resource_text(item: CatalogItem) -> str:
    parts = [
        f"Resource Title: {item.title}",
        f"Platform: {item.platform}",
        f"Related Skills: {', '.join(item.attributes)}",
        f"Cost: {item.cost.value if item.cost else 'Free'}",
        f"Description: {item.description}" if item.description else "",
    ]
    return ". ".join(p for p in parts if p)


def item_text(item: CatalogItem) -> str:
    return job_text(item) if item.kind == ItemKind.JOB else resource_text(item)


class EmbeddingSimilarityIndex(SimilarityIndex):
    def __init__(self, backend: str = "sbert", model_name: str = "TechWolf/JobBERT-v2") -> None:
        self.backend = backend
        self.model_name = model_name
        self._model = None
        self._vectorizer = None
        self._ids: dict[ItemKind, list[str]] = {}
        self._matrices: dict[ItemKind, object] = {}

    @property
    def size(self) -> int:
        return sum(len(ids) for ids in self._ids.values())

    def build(self, items: Iterable[CatalogItem]) -> int:
        """(Re)build the index from catalog items. Returns the number indexed.

        Items without attributes are left out: they can never be recommended.
        """
        indexed = [i for i in items if i.attributes]
        texts = [item_text(i) for i in indexed]
        self._ids = {}
        self._matrices = {}
        if not indexed:
            return 0

        matrix = self._fit(texts)
        if matrix is None:
            logger.warning("Similarity index is empty: catalog text has no usable vocabulary")
            return 0

        for kind in ItemKind:
            rows = [n for n, item in enumerate(indexed) if item.kind == kind]
            if not rows:
                continue
            self._ids[kind] = [indexed[n].id for n in rows]
            self._matrices[kind] = matrix[rows]

        logger.info("Similarity index built: %d items (%s backend)", len(indexed), self.backend)
        return len(indexed)

    def _fit(self, texts: list[str]):
        if self.backend == "sbert":
            self._model = similarity._get_sbert_model(self.model_name)
            if self._model is not None:
                return similarity.sbert_encode(self._model, texts)
            logger.warning("Falling back to TF-IDF similarity index")
            self.backend = "tfidf"

        self._vectorizer, matrix = similarity.fit_tfidf(texts)
        return matrix

    def _encode_query(self, query_text: str):
        if self.backend == "sbert" and self._model is not None:
            return similarity.sbert_encode(self._model, [query_text])
        if self._vectorizer is not None:
            return self._vectorizer.transform([query_text])
        raise SimilarityIndexError("similarity index has not been built")

    def search(self, kind: ItemKind, query_text: str, top_k: int) -> list[tuple[str, float]]:
        """Blocking nearest-neighbour search: ``(item_id, distance)`` nearest first."""
        ids = self._ids.get(kind)
        if not ids or top_k <= 0:
            return []
        distances = similarity.cosine_distances(self._matrices[kind], self._encode_query(query_text))
        order = np.argsort(distances, kind="stable")[:top_k]
        return [(ids[n], float(distances[n])) for n in order]

    async def query_similar(
        self, kind: ItemKind, query_text: str, top_k: int, timeout: float
    ) -> list[tuple[str, float]]:
        return await asyncio.to_thread(self.search, kind, query_text, top_k)
