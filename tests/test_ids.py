"""Tests for content id parsing and identity keys."""

from src.models.content import ContentCategory
from src.services.recommendations.ids import (
    LocalId,
    RemoteId,
    identity_keys,
    parse_content_id,
    parse_content_ids,
)
from tests.fakes import local_id, make_item


class TestParseContentId:
    """Tests for parse_content_id."""

    def test_local_id(self):
        """Test that 24-hex keys parse as local ids."""
        assert parse_content_id(local_id(7)) == LocalId(local_id(7))

    def test_local_id_is_lowercased(self):
        """Test that hex case does not create distinct ids."""
        assert parse_content_id("ABCDEF0123456789ABCDEF01") == LocalId("abcdef0123456789abcdef01")

    def test_remote_ids(self):
        """Test that composite ids parse into kind and numeric id."""
        assert parse_content_id("movie_603") == RemoteId("movie", 603)
        assert parse_content_id("tv_1399") == RemoteId("tv", 1399)

    def test_str_round_trip(self):
        """Test that ids print in their stored form."""
        assert str(RemoteId("tv", 1399)) == "tv_1399"
        assert str(LocalId(local_id(1))) == local_id(1)

    def test_unrecognised_shapes(self):
        """Test that other strings are ignored."""
        for raw in ["", "missing-id", "movie_", "book_12", "movie_12a", "abc123"]:
            assert parse_content_id(raw) is None

    def test_parse_many_dedupes_in_order(self):
        """Test that parse_content_ids drops junk and duplicates."""
        ids = parse_content_ids(["movie_1", "junk", local_id(2), "movie_1", local_id(2).upper()])
        assert ids == [RemoteId("movie", 1), LocalId(local_id(2))]


class TestIdentityKeys:
    """Tests for identity_keys."""

    def test_local_item_without_tmdb_id(self):
        """Test that a plain local item has only its own key."""
        assert identity_keys(make_item(1)) == {LocalId(local_id(1))}

    def test_local_movie_with_tmdb_id(self):
        """Test that an imported movie is also known by its composite id."""
        item = make_item(1, tmdb_id=603)
        assert identity_keys(item) == {LocalId(local_id(1)), RemoteId("movie", 603)}

    def test_local_series_with_tmdb_id(self):
        """Test that series map to the tv namespace."""
        item = make_item(1, tmdb_id=1399, category=ContentCategory.SERIES)
        assert RemoteId("tv", 1399) in identity_keys(item)

    def test_remote_item(self):
        """Test that a remote item is known by its composite id."""
        item = make_item(1).model_copy(update={"id": "movie_603", "tmdb_id": 603, "source": "tmdb"})
        assert identity_keys(item) == {RemoteId("movie", 603)}
