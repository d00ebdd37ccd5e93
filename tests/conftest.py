"""Pytest configuration and shared fixtures for table gateway tests"""

import os
from pathlib import Path
from typing import Iterator, Optional

import pytest
from dotenv import load_dotenv
from pydantic import BaseModel
from sqlalchemy import Row

from db_table_gateway import CachePolicy, Column, DatabaseConfig, DatabaseConnection, Table

# Load environment variables
load_dotenv()


# ==================== Sample Tables ====================


class Book(BaseModel):
    """Row type of the sample books table"""

    id: int
    title: str
    author: Optional[str] = None
    price: Optional[float] = None


BOOK_ID = Column("books", "id", "INTEGER", primary_key=True)
BOOK_TITLE = Column("books", "title", "VARCHAR(128)")
BOOK_AUTHOR = Column("books", "author", "VARCHAR(128)")
BOOK_PRICE = Column("books", "price", "REAL")


class BookTable(Table[Book]):
    """Gateway for the sample books table"""

    def __init__(self, connection: DatabaseConnection, **kwargs):
        super().__init__(
            connection, "books", BOOK_ID, BOOK_TITLE, BOOK_AUTHOR, BOOK_PRICE, **kwargs
        )
        self.default_order_by = (BOOK_ID,)

    def insert(self, obj: Book) -> None:
        self.insert_values(obj.id, obj.title, obj.author, obj.price)

    def retrieve(self, row: Row) -> Book:
        return Book(**row._mapping)


REVIEW_BOOK = Column("reviews", "book_id", "INTEGER", primary_key=True)
REVIEW_REVIEWER = Column("reviews", "reviewer", "VARCHAR(64)", primary_key=True)
REVIEW_RATING = Column("reviews", "rating", "INTEGER", default=3)


class ReviewTable(Table[dict]):
    """Gateway for a sample table with a composite primary key"""

    def __init__(self, connection: DatabaseConnection, **kwargs):
        super().__init__(
            connection, "reviews", REVIEW_BOOK, REVIEW_REVIEWER, REVIEW_RATING, **kwargs
        )

    def insert(self, obj: dict) -> None:
        self.insert_values(obj["book_id"], obj["reviewer"], obj.get("rating"))

    def retrieve(self, row: Row) -> dict:
        return dict(row._mapping)


class DictTable(Table[dict]):
    """Gateway over any column list, returning rows as dictionaries"""

    def insert(self, obj: dict) -> None:
        self.insert_values(*(obj.get(column.name) for column in self.columns))

    def retrieve(self, row: Row) -> dict:
        return dict(row._mapping)


# ==================== Configuration Fixtures ====================


@pytest.fixture(scope="session")
def pg_database_url() -> Optional[str]:
    """PostgreSQL test database URL from environment"""
    return os.getenv("PG_TEST_DATABASE_URL")


@pytest.fixture
def sqlite_config(tmp_path: Path) -> DatabaseConfig:
    """SQLite database configuration in a temporary directory"""
    return DatabaseConfig(url="sqlite:///{0}/test.db", database_dir=tmp_path)


@pytest.fixture
def pg_config(pg_database_url: Optional[str]) -> DatabaseConfig:
    """PostgreSQL database configuration"""
    if not pg_database_url:
        pytest.skip("PG_TEST_DATABASE_URL not set in environment")
    return DatabaseConfig(url=pg_database_url)


# ==================== Connection Fixtures ====================


@pytest.fixture
def connection(sqlite_config: DatabaseConfig) -> Iterator[DatabaseConnection]:
    """SQLite database connection with proper cleanup"""
    connection = DatabaseConnection(sqlite_config)
    connection.initialize()
    try:
        yield connection
    finally:
        connection.dispose()


@pytest.fixture
def pg_connection(pg_config: DatabaseConfig) -> Iterator[DatabaseConnection]:
    """PostgreSQL database connection with proper cleanup"""
    connection = DatabaseConnection(pg_config)
    connection.initialize()
    try:
        yield connection
    finally:
        connection.dispose()


# ==================== Table Fixtures ====================


@pytest.fixture
def book_table(connection: DatabaseConnection) -> BookTable:
    """Freshly created books table"""
    table = BookTable(connection)
    table.create()
    return table


@pytest.fixture
def loaded_book_table(book_table: BookTable) -> BookTable:
    """Books table holding ten books with ids 1 to 10"""
    for book_id in range(1, 11):
        book_table.insert(
            Book(id=book_id, title=f"Book {book_id}", author="Anon", price=book_id * 1.5)
        )
    return book_table


@pytest.fixture
def review_table(connection: DatabaseConnection) -> ReviewTable:
    """Freshly created reviews table"""
    table = ReviewTable(connection)
    table.create()
    return table


class FakeClock:
    """Manually advanced clock for cache expiration tests"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cached_book_table(connection: DatabaseConnection, clock: FakeClock) -> BookTable:
    """Books table caching its record count for 60 seconds of the fake clock"""
    table = BookTable(connection, cache_policy=CachePolicy(lifetime=60), clock=clock)
    table.create()
    return table


# ==================== Pytest Configuration ====================


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "sqlite: SQLite-backed tests")
    config.addinivalue_line("markers", "postgresql: PostgreSQL-specific tests")
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring database"
    )
