"""Root conftest — shared test configuration."""

import os

# Keep tests off any real database and out of the startup table creation path
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_CREATE_TABLES", "false")
os.environ.setdefault("LOG_FORMAT", "text")
