"""TF-IDF and JobBERT-v2 text encoders for the catalog similarity index."""

import logging

import numpy as np
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity as sklearn_cosine

logger = logging.getLogger(__name__)

# Lazy-loaded sentence-transformers models keyed by name (JobBERT-v2 is ~425MB)
_sbert_models: dict = {}


def _get_sbert_model(model_name: str = "TechWolf/JobBERT-v2"):
    """Load a SentenceTransformer lazily on first call. Returns None if unavailable."""
    if model_name not in _sbert_models:
        try:
            from sentence_transformers import SentenceTransformer

            _sbert_models[model_name] = SentenceTransformer(model_name)
            logger.info("%s model loaded successfully", model_name)
        except Exception as e:
            logger.warning("Failed to load %s model: %s", model_name, e)
            return None
    return _sbert_models[model_name]


def sbert_encode(model, texts: list[str]) -> np.ndarray:
    """Encode texts into L2-normalised embedding rows."""
    if not texts:
        return np.zeros((0, 0))
    return model.encode(texts, convert_to_numpy=True, normalize_embeddings=True)


def fit_tfidf(texts: list[str]) -> tuple[TfidfVectorizer | None, object]:
    """Fit a TF-IDF vectorizer on the corpus. Returns (None, None) for an empty vocabulary."""
    vectorizer = TfidfVectorizer(
        stop_words="english",
        max_features=5000,
        sublinear_tf=True,
        ngram_range=(1, 2),
    )
    try:
        matrix = vectorizer.fit_transform(texts)
    except ValueError:
        return None, None
    return vectorizer, matrix


def cosine_scores(matrix, query_vector) -> np.ndarray:
    """Cosine similarity of every row in ``matrix`` against one query row."""
    return sklearn_cosine(matrix, query_vector)[:, 0]


def cosine_distances(matrix, query_vector) -> np.ndarray:
    """Cosine distance ``1 - cos`` in [0, 2]."""
    return np.clip(1.0 - cosine_scores(matrix, query_vector), 0.0, 2.0)
