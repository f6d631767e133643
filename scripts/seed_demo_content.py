#!/usr/bin/env python3
"""Seed a demo catalogue and demo activity for a profile.

Inserts a small set of movies and series (skipping titles that already
exist) and, when a profile is given, likes a few random items, records
watch progress on others and adds a couple of searches so the profile
gets genre-based recommendations right away.

Usage:
    python scripts/seed_demo_content.py [--profile-id=ID] [--likes=N] [--seed=N] [--dry-run]

Options:
    --profile-id  Create demo activity for this profile
    --likes       Number of items to like (default 4)
    --seed        Random seed for reproducible activity
    --dry-run     Show what would be inserted without making changes
"""

import argparse
import asyncio
import random
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from src.db.crud import record_search, toggle_like, update_watch_progress
from src.db.database import async_session_maker, init_db
from src.models.content import Content, ContentCategory, ContentSection

DEMO_CONTENT = [
    {"title": "Stranger Things", "category": ContentCategory.SERIES, "genre": "Drama, Fantasy, Horror",
     "year": 2016, "rating": "8.7", "popularity": 95.0, "section": ContentSection.TRENDING},
    {"title": "The Crown", "category": ContentCategory.SERIES, "genre": "Drama, History",
     "year": 2016, "rating": "8.6", "popularity": 71.0, "section": ContentSection.SERIES},
    {"title": "Money Heist", "category": ContentCategory.SERIES, "genre": "Action, Crime, Thriller",
     "year": 2017, "rating": "8.2", "popularity": 88.0, "section": ContentSection.TRENDING},
    {"title": "Dark", "category": ContentCategory.SERIES, "genre": "Sci-Fi, Thriller, Mystery",
     "year": 2017, "rating": "8.8", "popularity": 64.0, "section": ContentSection.SERIES},
    {"title": "Extraction", "category": ContentCategory.MOVIE, "genre": "Action, Thriller",
     "year": 2020, "rating": "6.7", "popularity": 77.0, "section": ContentSection.MOVIES},
    {"title": "The Irishman", "category": ContentCategory.MOVIE, "genre": "Crime, Drama",
     "year": 2019, "rating": "7.8", "popularity": 52.0, "section": ContentSection.MOVIES},
    {"title": "Red Notice", "category": ContentCategory.MOVIE, "genre": "Action, Comedy",
     "year": 2021, "rating": "6.3", "popularity": 69.0, "section": ContentSection.MOVIES},
    {"title": "Don't Look Up", "category": ContentCategory.MOVIE, "genre": "Comedy, Drama, Sci-Fi",
     "year": 2021, "rating": "7.2", "popularity": 58.0, "section": ContentSection.TRENDING},
    {"title": "Bird Box", "category": ContentCategory.MOVIE, "genre": "Horror, Thriller, Sci-Fi",
     "year": 2018, "rating": "6.6", "popularity": 61.0, "section": ContentSection.MOVIES},
    {"title": "Our Planet", "category": ContentCategory.SERIES, "genre": "Documentary",
     "year": 2019, "rating": "9.3", "popularity": 40.0, "section": ContentSection.SERIES},
]

DEMO_SEARCHES = ["space adventure", "funny movies", "action"]


async def seed_demo_content(
    profile_id: str | None = None,
    likes: int = 4,
    seed: int | None = None,
    dry_run: bool = False,
) -> None:
    """Insert demo content and optional demo activity.

    Args:
        profile_id: Profile to create demo activity for
        likes: Number of items the profile likes
        seed: Random seed for reproducible activity
        dry_run: Show what would be inserted without making changes
    """
    rng = random.Random(seed)
    await init_db()

    async with async_session_maker() as db:
        result = await db.execute(select(Content.title))
        existing = set(result.scalars().all())

        inserted = 0
        for entry in DEMO_CONTENT:
            if entry["title"] in existing:
                print(f"- Exists: {entry['title']}")
                continue
            print(f"- Insert: {entry['title']} ({entry['genre']})")
            if not dry_run:
                db.add(Content(description=f"Demo entry for {entry['title']}.", **entry))
            inserted += 1

        if not dry_run:
            await db.flush()

        if profile_id and not dry_run:
            result = await db.execute(select(Content))
            catalogue = list(result.scalars().all())
            picks = rng.sample(catalogue, min(len(catalogue), likes * 2))

            for content in picks[:likes]:
                await toggle_like(db, profile_id, content.id, True)
                print(f"  Liked: {content.title}")
            for content in picks[likes:]:
                progress = float(rng.randint(10, 95))
                await update_watch_progress(db, profile_id, content.id, progress)
                print(f"  Watched: {content.title} ({progress:.0f}%)")
            for query in DEMO_SEARCHES:
                await record_search(db, profile_id, query, 0)
                print(f"  Searched: {query}")

        if not dry_run:
            await db.commit()

        print(f"\n{'[DRY RUN] ' if dry_run else ''}Done!")
        print(f"  Inserted: {inserted}")
        print(f"  Skipped:  {len(DEMO_CONTENT) - inserted}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo content and activity")
    parser.add_argument("--profile-id", help="Create demo activity for this profile")
    parser.add_argument("--likes", type=int, default=4, help="Number of items to like")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible activity")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be inserted without changes")
    args = parser.parse_args()

    asyncio.run(seed_demo_content(
        profile_id=args.profile_id,
        likes=args.likes,
        seed=args.seed,
        dry_run=args.dry_run,
    ))
