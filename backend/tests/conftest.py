"""Root conftest: shared test configuration."""

import os

# Tests never touch a real database unless a fixture builds one explicitly
os.environ.setdefault("SCAVENGER_STORE_BACKEND", "memory")
os.environ.setdefault("SCAVENGER_DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("SCAVENGER_LOG_FORMAT", "text")
