# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Book record with copy accounting."""

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class Book:
    """
    A book title and its copy counts.

    ``available_copies`` is the source of truth the engine decrements when a
    reservation is created; ``available`` is derived from it.

    Attributes:
        id: Unique book identifier
        title: Book title
        author: Author name
        total_copies: Number of copies the library owns
        available_copies: Number of copies free to reserve
        isbn: Optional ISBN
    """

    id: str
    title: str
    author: str
    total_copies: int
    available_copies: int
    isbn: str | None = None

    def __post_init__(self) -> None:
        if self.total_copies < 0:
            raise ValueError("total_copies must not be negative")
        if not 0 <= self.available_copies <= self.total_copies:
            raise ValueError(
                f"available_copies must be between 0 and {self.total_copies}, "
                f"got {self.available_copies}"
            )

    @property
    def available(self) -> bool:
        return self.available_copies > 0

    def with_available_copies(self, available_copies: int) -> "Book":
        """Return a copy of this book with a new available copy count."""
        return replace(self, available_copies=available_copies)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Book":
        return cls(
            id=str(record["id"]),
            title=record.get("title", ""),
            author=record.get("author", ""),
            total_copies=int(record["total_copies"]),
            available_copies=int(record["available_copies"]),
            isbn=record.get("isbn"),
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "available": self.available,
            "total_copies": self.total_copies,
            "available_copies": self.available_copies,
        }


__all__ = ["Book"]
