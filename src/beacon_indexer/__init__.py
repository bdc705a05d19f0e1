"""Beacon chain attestation indexer and network participation rate service."""
