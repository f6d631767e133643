"""Genre vocabulary shared by every genre-aware component.

Maps human-readable genre names to TMDB numeric genre ids and back, and
holds the keyword table used to read genre intent out of search queries.
"""

import re

# Official TMDB movie genres
MOVIE_GENRES: dict[str, int] = {
    "Action": 28,
    "Adventure": 12,
    "Animation": 16,
    "Comedy": 35,
    "Crime": 80,
    "Documentary": 99,
    "Drama": 18,
    "Family": 10751,
    "Fantasy": 14,
    "History": 36,
    "Horror": 27,
    "Music": 10402,
    "Mystery": 9648,
    "Romance": 10749,
    "Science Fiction": 878,
    "TV Movie": 10770,
    "Thriller": 53,
    "War": 10752,
    "Western": 37,
}

# TV-only TMDB genres (ids shared with movies are not repeated)
TV_GENRES: dict[str, int] = {
    "Action & Adventure": 10759,
    "Kids": 10762,
    "News": 10763,
    "Reality": 10764,
    "Sci-Fi & Fantasy": 10765,
    "Soap": 10766,
    "Talk": 10767,
    "War & Politics": 10768,
}

# Names used by the local catalogue that TMDB spells differently
GENRE_ALIASES: dict[str, int] = {
    "Sci-Fi": 878,
    "SciFi": 878,
}

# Search keyword -> genre. Matched as whole lowercase words of the query.
SEARCH_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Action": ("action", "thriller", "fight", "explosion", "superhero", "martial arts"),
    "Comedy": ("funny", "comedy", "laugh", "humor", "hilarious", "sitcom"),
    "Drama": ("drama", "emotional", "tearjerker", "biography"),
    "Horror": ("horror", "scary", "ghost", "zombie", "haunted", "slasher"),
    "Romance": ("romance", "romantic", "love story", "love"),
    "Sci-Fi": ("sci-fi", "scifi", "science fiction", "space", "alien", "robot", "future"),
    "Fantasy": ("fantasy", "magic", "dragon", "wizard", "fairy"),
    "Documentary": ("documentary", "docu", "true story", "nature"),
}


class GenreVocabulary:
    """Bidirectional genre name <-> TMDB id lookup.

    Name lookups are case-insensitive. Reverse lookups return the official
    TMDB spelling.
    """

    def __init__(
        self,
        movie_genres: dict[str, int] = MOVIE_GENRES,
        tv_genres: dict[str, int] = TV_GENRES,
        aliases: dict[str, int] = GENRE_ALIASES,
    ) -> None:
        self._ids_by_name: dict[str, int] = {}
        self._names_by_id: dict[int, str] = {}

        for name, genre_id in {**movie_genres, **tv_genres}.items():
            self._ids_by_name[name.lower()] = genre_id
            self._names_by_id.setdefault(genre_id, name)
        for name, genre_id in aliases.items():
            self._ids_by_name[name.lower()] = genre_id

    def id_for(self, name: str) -> int | None:
        """TMDB id for a genre name, or None if the name is unknown."""
        return self._ids_by_name.get(name.strip().lower())

    def name_for(self, genre_id: int) -> str | None:
        """Official genre name for a TMDB id, or None if the id is unknown."""
        return self._names_by_id.get(genre_id)

    def ids_for(self, names: list[str]) -> list[int]:
        """Map names to ids, dropping unknown names and duplicate ids (order kept)."""
        ids: list[int] = []
        for name in names:
            genre_id = self.id_for(name)
            if genre_id is not None and genre_id not in ids:
                ids.append(genre_id)
        return ids

    def names_for(self, genre_ids: list[int]) -> list[str]:
        """Map ids to names, dropping unknown ids."""
        return [name for name in (self.name_for(g) for g in genre_ids) if name]


def _keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    # Whole words only; multi-word phrases stay whole
    alternation = "|".join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf"\b(?:{alternation})\b")


_KEYWORD_PATTERNS: dict[str, re.Pattern[str]] = {
    genre: _keyword_pattern(keywords) for genre, keywords in SEARCH_KEYWORDS.items()
}


def genres_in_query(query: str) -> list[str]:
    """Genres whose keywords appear as whole words in a free-text search query."""
    text = query.lower()
    return [genre for genre, pattern in _KEYWORD_PATTERNS.items() if pattern.search(text)]


vocabulary = GenreVocabulary()
