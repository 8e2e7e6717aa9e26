# src/prodash/core/news.py

"""Static news feed. No live source is wired in; articles are fixed demo data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

CATEGORIES: Final[tuple[str, ...]] = (
    "technology",
    "business",
    "health",
    "science",
    "entertainment",
    "sports",
)


@dataclass(frozen=True, slots=True)
class NewsArticle:
    id: str
    title: str
    description: str
    url: str
    published_at: str
    source: str
    category: str


MOCK_ARTICLES: Final[tuple[NewsArticle, ...]] = (
    NewsArticle(
        id="1",
        title="New AI Model Achieves Breakthrough in Natural Language Understanding",
        description=(
            "Researchers have developed a new AI model that demonstrates unprecedented capabilities "
            "in understanding and generating human language."
        ),
        url="#",
        published_at="2025-05-16T14:32:00Z",
        source="Tech Innovations",
        category="technology",
    ),
    NewsArticle(
        id="2",
        title="Global Markets React to Central Bank Policy Shift",
        description=(
            "Stock markets worldwide showed volatility as major central banks signaled a potential "
            "change in monetary policy."
        ),
        url="#",
        published_at="2025-05-17T08:45:00Z",
        source="Financial Times",
        category="business",
    ),
    NewsArticle(
        id="3",
        title="New Study Reveals Benefits of Intermittent Exercise",
        description=(
            "Short bursts of exercise throughout the day may provide comparable health benefits "
            "to longer workout sessions."
        ),
        url="#",
        published_at="2025-05-16T11:20:00Z",
        source="Health Today",
        category="health",
    ),
    NewsArticle(
        id="4",
        title="Astronomers Discover Potentially Habitable Exoplanet",
        description=(
            "A new exoplanet within the habitable zone of its star shows promising signs of "
            "conditions that could support life."
        ),
        url="#",
        published_at="2025-05-15T16:10:00Z",
        source="Science Daily",
        category="science",
    ),
    NewsArticle(
        id="5",
        title="Award-Winning Director Announces Groundbreaking Virtual Reality Film",
        description=(
            "A renowned filmmaker revealed plans to blend traditional cinema with virtual reality "
            "for an immersive narrative experience."
        ),
        url="#",
        published_at="2025-05-17T09:15:00Z",
        source="Entertainment Weekly",
        category="entertainment",
    ),
    NewsArticle(
        id="6",
        title="Major Upset in International Tennis Tournament",
        description=(
            "An unexpected outcome in yesterday's championship match surprised fans and analysts "
            "alike."
        ),
        url="#",
        published_at="2025-05-16T22:05:00Z",
        source="Sports Network",
        category="sports",
    ),
)


def list_articles(category: str | None = None) -> list[NewsArticle]:
    """All articles, or only those of one category ('all'/None means no filter)."""
    cat = (category or "all").strip().lower()
    if cat == "all":
        return list(MOCK_ARTICLES)
    return [a for a in MOCK_ARTICLES if a.category == cat]
