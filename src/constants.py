"""Application constants - centralized configuration values."""

# =============================================================================
# Recommendations
# =============================================================================
DEFAULT_RECOMMENDATION_LIMIT = 10
DEFAULT_RELATED_LIMIT = 6
MAX_FAVORITE_GENRES = 5
MAX_REMOTE_GENRE_LOOKUPS = 10  # Liked TMDB items resolved per call
REMOTE_LOOKUP_CONCURRENCY = 5
DEFAULT_FAVORITE_GENRES = ["Action", "Drama", "Comedy", "Thriller"]

# Discovery vote thresholds (TMDB vote_count.gte)
MIN_VOTES_STRICT = 100
MIN_VOTES_BROAD = 20

# =============================================================================
# Interactions
# =============================================================================
MAX_SEARCH_HISTORY = 50
DEFAULT_SEARCH_HISTORY_LIMIT = 20
MAX_ACTIVITY_LOG = 100
DEFAULT_ACTIVITY_LIMIT = 50
MAX_SEARCH_RESULTS = 20

# =============================================================================
# Pagination
# =============================================================================
MAX_PAGE_SIZE = 50

# =============================================================================
# API Timeouts (in seconds)
# =============================================================================
HTTPX_TIMEOUT = 10.0

# =============================================================================
# Media Types
# =============================================================================
TMDB_MEDIA_TYPE_MOVIE = "movie"
TMDB_MEDIA_TYPE_TV = "tv"

# =============================================================================
# External API URLs
# =============================================================================
TMDB_API_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
