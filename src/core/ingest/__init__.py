"""Raw telemetry ingestion."""

from src.core.ingest.normalizer import normalize

__all__ = ["normalize"]
