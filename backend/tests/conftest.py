"""
Pytest configuration and fixtures for testing.
"""

import os
import shutil
import tempfile

# Point the application at a throwaway dataset and database before it is imported
TEST_DATASET_DIR = tempfile.mkdtemp(prefix="speech-review-")
os.environ["DATASET_PATH"] = TEST_DATASET_DIR
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from typing import Generator, List, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import get_db, Base
from app.models.review import ReviewRecord  # noqa: F401


SAMPLE_METADATA: List[Tuple[str, str]] = [
    ("a.wav", "hello world"),
    ("b.wav", "good morning"),
    ("c.wav", "see you later"),
]


def write_metadata(dataset_dir: str, rows: List[Tuple[str, str]], trailing_newline: bool = False) -> None:
    """
    Write a metadata.tsv and matching empty wav files.

    Rows are newline-separated; a trailing newline adds an empty metadata row.
    """
    os.makedirs(os.path.join(dataset_dir, "wavs"), exist_ok=True)
    with open(os.path.join(dataset_dir, "metadata.tsv"), "w", encoding="utf-8") as f:
        f.write("\n".join(f"{filename}\t{text}" for filename, text in rows))
        if trailing_newline:
            f.write("\n")
    for filename, _ in rows:
        with open(os.path.join(dataset_dir, "wavs", filename), "wb") as f:
            f.write(b"RIFF")


@pytest.fixture(scope="function")
def test_engine() -> Engine:
    """Create a fresh in-memory database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def test_db(test_engine: Engine) -> Generator[Session, None, None]:
    """Create test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def dataset_dir() -> Generator[str, None, None]:
    """Dataset directory served by the app, filled with sample metadata."""
    write_metadata(TEST_DATASET_DIR, SAMPLE_METADATA)
    yield TEST_DATASET_DIR
    for name in os.listdir(TEST_DATASET_DIR):
        path = os.path.join(TEST_DATASET_DIR, name)
        if os.path.isdir(path):
            shutil.rmtree(path, ignore_errors=True)
        else:
            os.remove(path)


@pytest.fixture(scope="function")
def client(test_db: Session, dataset_dir: str) -> Generator[TestClient, None, None]:
    """Create test client with database dependency override."""
    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
