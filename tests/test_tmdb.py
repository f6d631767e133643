"""Tests for the TMDB remote catalogue client."""

import httpx
import pytest

from src.services.metadata.tmdb import RemoteCatalogError, TMDBService
from src.services.recommendations.ports import SortBy
from src.utils.retry import RetryConfig

NO_WAIT = RetryConfig(max_retries=1, base_delay=0.0)


def make_service(handler, api_key: str = "v3-key") -> tuple[TMDBService, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    service = TMDBService(
        api_key=api_key,
        language="en-US",
        retry_config=NO_WAIT,
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(record)),
    )
    return service, requests


class TestTMDBService:
    """Tests for TMDBService requests and normalization."""

    @pytest.mark.asyncio
    async def test_discover_query(self):
        """Test that discovery sends AND-joined genres and the vote threshold."""
        service, requests = make_service(lambda r: httpx.Response(200, json={"results": [
            {"id": 603, "title": "The Matrix", "genre_ids": [28, 878], "popularity": 80.1,
             "vote_count": 25000, "vote_average": 8.2, "release_date": "1999-03-30"},
        ]}))

        results = await service.discover_by_genres([28, 878], 100, SortBy.POPULARITY)

        params = requests[0].url.params
        assert requests[0].url.path == "/3/discover/movie"
        assert params["with_genres"] == "28,878"
        assert params["vote_count.gte"] == "100"
        assert params["sort_by"] == "popularity.desc"
        assert params["api_key"] == "v3-key"
        assert results[0]["id"] == 603
        assert results[0]["kind"] == "movie"
        assert results[0]["genre_ids"] == [28, 878]

    @pytest.mark.asyncio
    async def test_bearer_token(self):
        """Test that read access tokens go in the Authorization header."""
        service, requests = make_service(
            lambda r: httpx.Response(200, json={"results": []}), api_key="eyJtoken"
        )

        await service.get_currently_popular()

        assert requests[0].headers["Authorization"] == "Bearer eyJtoken"
        assert "api_key" not in requests[0].url.params
        assert requests[0].url.path == "/3/movie/popular"

    @pytest.mark.asyncio
    async def test_item_details_genre_names(self):
        """Test that details expose genre names."""
        service, requests = make_service(lambda r: httpx.Response(200, json={
            "id": 1399, "name": "Game of Thrones", "first_air_date": "2011-04-17",
            "genres": [{"id": 10765, "name": "Sci-Fi & Fantasy"}, {"id": 18, "name": "Drama"}],
        }))

        details = await service.get_item_details("tv", 1399)

        assert requests[0].url.path == "/3/tv/1399"
        assert details["genres"] == ["Sci-Fi & Fantasy", "Drama"]
        assert details["title"] == "Game of Thrones"

    @pytest.mark.asyncio
    async def test_not_found_raises(self):
        """Test that a non-200 answer is an error."""
        service, _ = make_service(lambda r: httpx.Response(404, json={}))

        with pytest.raises(RemoteCatalogError):
            await service.get_item_details("movie", 1)

    @pytest.mark.asyncio
    async def test_server_errors_retried_then_raise(self):
        """Test that 5xx answers are retried before failing."""
        service, requests = make_service(lambda r: httpx.Response(503))

        with pytest.raises(RemoteCatalogError):
            await service.discover_by_genres([18], 20)

        assert len(requests) == 2

    @pytest.mark.asyncio
    async def test_retry_recovers(self):
        """Test that a transient error followed by success returns data."""
        answers = iter([httpx.Response(502), httpx.Response(200, json={"results": [{"id": 1}]})])
        service, _ = make_service(lambda r: next(answers))

        results = await service.discover_by_genres([18], 20)

        assert [r["id"] for r in results] == [1]

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        """Test that connection failures surface as catalogue errors."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        service, _ = make_service(refuse)

        with pytest.raises(RemoteCatalogError):
            await service.get_currently_popular()

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        """Test that an unconfigured client refuses to call out."""
        service, requests = make_service(lambda r: httpx.Response(200, json={}), api_key="")

        with pytest.raises(RemoteCatalogError):
            await service.get_item_details("movie", 1)
        assert requests == []

    @pytest.mark.asyncio
    async def test_unknown_kind(self):
        """Test that only movie and tv kinds are accepted."""
        service, _ = make_service(lambda r: httpx.Response(200, json={}))

        with pytest.raises(RemoteCatalogError):
            await service.get_item_details("book", 1)
