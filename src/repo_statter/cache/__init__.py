"""Content-addressed cache for commit snapshots and per-file analysis."""

from .serialization import SCHEMA_VERSION, CacheMetadata
from .state import HEAD_LOOKUP_TIMEOUT_SECONDS, RepositoryStateHasher, compute_state_fingerprint
from .store import AnalysisCache, CacheStats, entry_id

__all__ = [
    "AnalysisCache",
    "CacheMetadata",
    "CacheStats",
    "HEAD_LOOKUP_TIMEOUT_SECONDS",
    "RepositoryStateHasher",
    "SCHEMA_VERSION",
    "compute_state_fingerprint",
    "entry_id",
]
