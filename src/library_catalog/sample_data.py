"""
Sample catalog data.

``SAMPLE_BOOKS`` is the fixed seven-book set the browser page seeds.
``generate_books`` adds any number of realistic random records via Faker,
for exercising the catalog with more than a handful of rows.
"""

from datetime import datetime
from typing import Any

from faker import Faker

SAMPLE_BOOKS: list[dict[str, Any]] = [
    {"title": "The Hobbit", "author": "J.R.R. Tolkien", "category": "Fantasy",
     "publishedYear": 1937, "availableCopies": 5},
    {"title": "1984", "author": "George Orwell", "category": "Dystopian",
     "publishedYear": 1949, "availableCopies": 3},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "category": "Fiction",
     "publishedYear": 1960, "availableCopies": 4},
    {"title": "The Martian", "author": "Andy Weir", "category": "Sci-Fi",
     "publishedYear": 2011, "availableCopies": 6},
    {"title": "Becoming", "author": "Michelle Obama", "category": "Biography",
     "publishedYear": 2018, "availableCopies": 2},
    {"title": "Project Hail Mary", "author": "Andy Weir", "category": "Sci-Fi",
     "publishedYear": 2021, "availableCopies": 7},
    {"title": "Atomic Habits", "author": "James Clear", "category": "Self-Help",
     "publishedYear": 2018, "availableCopies": 0},
]

CATEGORIES = [
    "Biography",
    "Dystopian",
    "Fantasy",
    "Fiction",
    "History",
    "Mystery",
    "Poetry",
    "Sci-Fi",
    "Self-Help",
]


def generate_books(count: int, seed: int | None = None) -> list[dict[str, Any]]:
    """Generate ``count`` valid book payloads; the same seed yields the same books."""
    fake = Faker()
    if seed is not None:
        fake.seed_instance(seed)

    this_year = datetime.now().year
    return [
        {
            "title": fake.catch_phrase(),
            "author": fake.name(),
            "category": fake.random_element(CATEGORIES),
            "publishedYear": fake.random_int(min=1900, max=this_year),
            "availableCopies": fake.random_int(min=0, max=10),
        }
        for _ in range(count)
    ]
