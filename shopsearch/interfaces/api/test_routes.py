"""Tests for API Routes."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from shopsearch.config.errors import RemoteUnavailableError
from shopsearch.domains.membership import MembershipSnapshot
from shopsearch.domains.search import (
    Category,
    Product,
    SearchOutcome,
    SessionState,
    SortOrder,
    Suggestions,
    coerce_sort_order,
)

from .deps import get_search_session
from .main import create_app


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock search session."""
    mock = MagicMock()
    mock.search = AsyncMock(
        return_value=SearchOutcome(
            query="sneaker",
            products=[
                Product(id="1", name="Red Sneakers", price=60),
                Product(id="2", name="Blue Sneaker", price=40),
            ],
            local_count=2,
            remote_count=1,
        )
    )
    mock.is_in_cart.side_effect = lambda pid: pid == "1"
    mock.is_in_wishlist.side_effect = lambda pid: pid == "2"
    mock.did_you_mean.return_value = []
    mock.index.size = 4
    mock.state = SessionState.SETTLED
    mock.cache.stats.return_value = {"size": 1, "hits": 0, "misses": 1, "by_sort": {"relevance": 1}}
    mock.recent_searches = ["sneaker", "shirt"]
    mock.suggestions.return_value = Suggestions(
        products=[Product(id="2", name="Blue Sneaker")],
        categories=[Category(id="c1", name="Sneakers")],
    )
    mock.membership.notify_changed = AsyncMock(
        return_value=MembershipSnapshot(cart_ids=frozenset({"2", "1"}))
    )
    return mock


@pytest.fixture
def client(mock_session: MagicMock) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    app = create_app()
    app.dependency_overrides[get_search_session] = lambda: mock_session

    yield TestClient(app)

    app.dependency_overrides.clear()


def test_health_endpoint(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "shopsearch"
    assert data["catalog_products"] == 4
    assert data["session_state"] == "settled"
    assert data["cache"]["misses"] == 1


def test_health_degraded_without_catalog(client: TestClient, mock_session: MagicMock) -> None:
    mock_session.index.size = 0
    assert client.get("/health").json()["status"] == "degraded"


def test_api_info(client: TestClient) -> None:
    response = client.get("/api")
    assert response.status_code == 200
    assert response.json()["name"] == "ShopSearch API"


def test_search_returns_decorated_rows(client: TestClient, mock_session: MagicMock) -> None:
    """Results carry cart/wishlist flags."""
    response = client.get("/api/search", params={"q": "sneaker", "sort": "price"})
    assert response.status_code == 200

    data = response.json()
    assert data["query"] == "sneaker"
    assert data["total"] == 2
    assert [r["product"]["id"] for r in data["results"]] == ["1", "2"]
    assert data["results"][0]["in_cart"] is True
    assert data["results"][1]["in_wishlist"] is True
    mock_session.search.assert_awaited_once_with("sneaker", SortOrder.PRICE)


def test_search_limit_truncates_rows(client: TestClient) -> None:
    response = client.get("/api/search", params={"q": "sneaker", "limit": 1})
    data = response.json()
    assert len(data["results"]) == 1
    assert data["total"] == 2


def test_search_empty_state_offers_alternatives(client: TestClient, mock_session: MagicMock) -> None:
    outcome = SearchOutcome(query="zzz", remote_error="[X] down")
    mock_session.search.return_value = outcome
    mock_session.outcome = outcome
    mock_session.did_you_mean.return_value = ["Blue Sneaker"]

    data = client.get("/api/search", params={"q": "zzz"}).json()

    assert data["results"] == []
    assert data["did_you_mean"] == ["Blue Sneaker"]
    assert data["remote_error"] == "[X] down"


def test_search_invalid_sort_is_bad_request(client: TestClient, mock_session: MagicMock) -> None:
    response = client.get("/api/search", params={"q": "sneaker", "sort": "cheapest"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "SEARCH_INVALID_QUERY"
    assert "relevance" in error["details"]["allowed"]
    mock_session.search.assert_not_awaited()


def test_suggestions_endpoint(client: TestClient, mock_session: MagicMock) -> None:
    response = client.get("/api/search/suggestions", params={"q": "sne"})
    assert response.status_code == 200

    data = response.json()
    assert data["products"] == ["Blue Sneaker"]
    assert data["categories"] == [{"id": "c1", "name": "Sneakers"}]
    mock_session.suggestions.assert_called_once_with("sne")


def test_recent_endpoint(client: TestClient) -> None:
    response = client.get("/api/search/recent")
    assert response.json() == {"items": ["sneaker", "shirt"]}


def test_membership_changed_endpoint(client: TestClient) -> None:
    response = client.post("/api/search/membership/changed")
    assert response.status_code == 200
    assert response.json() == {"cart": ["1", "2"], "wishlist": []}


def test_request_id_header_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert "X-Response-Time-Ms" in response.headers


def test_coerce_sort_order_accepts_enum_and_name() -> None:
    assert coerce_sort_order("newest") == SortOrder.NEWEST
    assert coerce_sort_order(SortOrder.RATING) == SortOrder.RATING


def test_search_reports_sequence_and_cache_headers(client: TestClient, mock_session: MagicMock) -> None:
    mock_session.search.return_value = SearchOutcome(query="sneaker", sequence=7, from_cache=True)

    response = client.get("/api/search", params={"q": "sneaker"})

    assert response.headers["X-Search-Sequence"] == "7"
    assert response.headers["X-Search-Cache"] == "hit"
    assert response.json()["from_cache"] is True


def test_superseded_search_returns_empty_own_query(client: TestClient, mock_session: MagicMock) -> None:
    mock_session.search.return_value = SearchOutcome(query="red", sequence=3, superseded=True)
    mock_session.did_you_mean.return_value = ["Blue Sneaker"]

    data = client.get("/api/search", params={"q": "red"}).json()

    assert data["query"] == "red"
    assert data["superseded"] is True
    assert data["results"] == []
    assert data["did_you_mean"] == []


def test_backend_outage_is_retryable(client: TestClient, mock_session: MagicMock) -> None:
    mock_session.membership.notify_changed.side_effect = RemoteUnavailableError(
        "Storefront returned 502", {"status": 502}
    )

    response = client.post("/api/search/membership/changed")

    assert response.status_code == 503
    assert response.headers["Retry-After"] == "5"
    body = response.json()
    assert body["retryable"] is True
    assert body["error"]["code"] == "SEARCH_REMOTE_UNAVAILABLE"
    assert body["error"]["details"] == {"status": 502}


def test_unexpected_error_is_internal(client: TestClient, mock_session: MagicMock) -> None:
    mock_session.suggestions.side_effect = RuntimeError("bug")

    response = client.get("/api/search/suggestions", params={"q": "x"})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"
    assert response.json()["retryable"] is False
    assert "Retry-After" not in response.headers
