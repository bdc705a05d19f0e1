"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

# Keep a developer's real key out of recorded explorer requests.
os.environ.pop("BEACON_INDEXER_API_KEY", None)

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
