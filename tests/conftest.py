"""Shared fixtures for the Carpenter test suite."""

from pathlib import Path

import pytest

from carpenter import Carpenter, db


USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com", "age": 34, "team": {"name": "Core"}},
    {"id": 2, "name": "Bob", "email": "bob@example.com", "age": 27, "team": {"name": "Web"}},
    {"id": 3, "name": "Carol", "email": "carol@example.org", "age": 41, "team": {"name": "Core"}},
    {"id": 4, "name": "Dave", "email": "dave@example.org", "age": None, "team": None},
    {"id": 5, "name": "Erin", "email": "erin@example.com", "age": 22, "team": {"name": "Data"}},
]


@pytest.fixture
def users() -> list[dict]:
    return [dict(u) for u in USERS]


@pytest.fixture
def carpenter() -> Carpenter:
    return Carpenter()


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite database file seeded with a users table."""
    url = str(tmp_path / "carpenter-test.db")
    db.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, email TEXT, age INTEGER)",
        database_url=url,
    )
    for user in USERS:
        db.execute(
            "INSERT INTO users (id, name, email, age) VALUES (%s, %s, %s, %s)",
            (user["id"], user["name"], user["email"], user["age"]),
            database_url=url,
        )
    return url
