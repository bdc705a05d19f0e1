"""Indexer node orchestrator."""

from .node import IndexerNode

__all__ = ["IndexerNode"]
