"""Global pytest configuration."""

import os

# Keep tests off the developer's cache file and any configured remote store
os.environ.setdefault("TRAVELPULSE_LOCAL_STORE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["TRAVELPULSE_REMOTE_STORE_URL"] = ""
