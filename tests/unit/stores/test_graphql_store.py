"""
Tests for GraphQLStore.

Requests are served by httpx.MockTransport so no endpoint is needed.
"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from library_reservations.exceptions import (
    ConfigurationError,
    StoreConnectionError,
    StoreFailureError,
)
from library_reservations.stores import GraphQLStore
from library_reservations.types import ReservationPolicy, ReservationStatus

URL = "https://library.example.com/v1/graphql"

BOOK_ROW = {
    "id": "b-1",
    "title": "Dune",
    "author": "Frank Herbert",
    "isbn": None,
    "available": True,
    "total_copies": 3,
    "available_copies": 3,
}

RESERVATION_ROW = {
    "id": "r-1",
    "user_id": "u-1",
    "book_id": "b-1",
    "expires_at": "2024-01-27T00:00:00",
    "status": "active",
    "created_at": "2024-01-20T00:00:00",
}


class RecordingHandler:
    """Serves canned GraphQL responses and records request bodies."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    def body(self, index=0):
        return json.loads(self.requests[index].content)


def make_store(handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GraphQLStore(url=URL, client=client, **kwargs)


class TestConfiguration:
    def test_requires_url(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_GRAPHQL_URL", raising=False)
        with pytest.raises(ConfigurationError):
            GraphQLStore()

    def test_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("LIBRARY_GRAPHQL_URL", URL)
        assert GraphQLStore().url == URL

    @pytest.mark.asyncio
    async def test_auth_headers(self, monkeypatch):
        monkeypatch.delenv("LIBRARY_GRAPHQL_ADMIN_SECRET", raising=False)
        handler = RecordingHandler({"data": {"books_by_pk": None}})
        store = make_store(handler, admin_secret="s3cret", auth_token="tok")

        await store.get_book("b-1")

        headers = handler.requests[0].headers
        assert headers["x-hasura-admin-secret"] == "s3cret"
        assert headers["authorization"] == "Bearer tok"


class TestBooks:
    @pytest.mark.asyncio
    async def test_get_book(self):
        handler = RecordingHandler({"data": {"books_by_pk": BOOK_ROW}})
        store = make_store(handler)

        book = await store.get_book("b-1")

        assert book.available_copies == 3
        assert handler.body()["variables"] == {"bookId": "b-1"}
        assert "books_by_pk" in handler.body()["query"]

    @pytest.mark.asyncio
    async def test_get_missing_book(self):
        store = make_store(RecordingHandler({"data": {"books_by_pk": None}}))
        assert await store.get_book("b-9") is None

    @pytest.mark.asyncio
    async def test_list_books_filters(self):
        handler = RecordingHandler({"data": {"books": [BOOK_ROW]}})
        store = make_store(handler)

        books = await store.list_books(search="dune", available_only=True)

        assert [b.id for b in books] == ["b-1"]
        conditions = handler.body()["variables"]["where"]["_and"]
        assert conditions[0]["_or"][0] == {"title": {"_ilike": "%dune%"}}
        assert conditions[1] == {"available_copies": {"_gt": 0}}

    @pytest.mark.asyncio
    async def test_list_books_unfiltered(self):
        handler = RecordingHandler({"data": {"books": []}})
        store = make_store(handler)
        assert await store.list_books() == []
        assert handler.body()["variables"] == {"where": {"_and": []}}

    @pytest.mark.asyncio
    async def test_update_availability(self):
        row = {**BOOK_ROW, "available": False, "available_copies": 0}
        handler = RecordingHandler({"data": {"update_books_by_pk": row}})
        store = make_store(handler)

        book = await store.update_book_availability("b-1", 0)

        assert book.available_copies == 0
        assert handler.body()["variables"] == {
            "bookId": "b-1",
            "availableCopies": 0,
            "available": False,
        }


class TestReservations:
    @pytest.mark.asyncio
    async def test_create_reservation(self):
        handler = RecordingHandler({"data": {"insert_reservations_one": RESERVATION_ROW}})
        store = make_store(handler)

        reservation = await store.create_reservation(
            "u-1", "b-1", datetime(2024, 1, 27, tzinfo=timezone.utc)
        )

        assert reservation.id == "r-1"
        assert reservation.expires_at == datetime(2024, 1, 27, tzinfo=timezone.utc)
        assert handler.body()["variables"]["expiresAt"] == "2024-01-27T00:00:00Z"

    @pytest.mark.asyncio
    async def test_list_reservations_with_status(self):
        row = {**RESERVATION_ROW, "book": {"id": "b-1", "title": "Dune", "author": "F", "isbn": None}}
        handler = RecordingHandler({"data": {"reservations": [row]}})
        store = make_store(handler)

        reservations = await store.list_reservations("u-1", ReservationStatus.ACTIVE)

        assert len(reservations) == 1
        assert handler.body()["variables"]["where"] == {
            "user_id": {"_eq": "u-1"},
            "status": {"_eq": "active"},
        }

    @pytest.mark.asyncio
    async def test_count_active(self):
        handler = RecordingHandler(
            {"data": {"reservations_aggregate": {"aggregate": {"count": 2}}}}
        )
        store = make_store(handler)
        assert await store.count_active_reservations("u-1") == 2

    @pytest.mark.asyncio
    async def test_update_status(self):
        row = {**RESERVATION_ROW, "status": "cancelled"}
        handler = RecordingHandler({"data": {"update_reservations_by_pk": row}})
        store = make_store(handler)

        updated = await store.update_reservation_status("r-1", ReservationStatus.CANCELLED)

        assert updated.status is ReservationStatus.CANCELLED
        assert handler.body()["variables"] == {"reservationId": "r-1", "status": "cancelled"}

    @pytest.mark.asyncio
    async def test_get_reservation_policies(self):
        handler = RecordingHandler(
            {
                "data": {
                    "reservation_policies": [
                        {
                            "id": "p-1",
                            "user_type": "student",
                            "max_reservations": 5,
                            "reservation_duration_days": 14,
                            "is_active": True,
                        }
                    ]
                }
            }
        )
        store = make_store(handler)
        assert await store.get_reservation_policies() == {
            "student": ReservationPolicy(5, 14)
        }


class TestFailures:
    @pytest.mark.asyncio
    async def test_graphql_errors(self):
        store = make_store(
            RecordingHandler({"errors": [{"message": "permission denied"}]})
        )
        with pytest.raises(StoreFailureError) as exc_info:
            await store.get_book("b-1")
        assert "permission denied" in str(exc_info.value)
        assert exc_info.value.operation == "get_book"

    @pytest.mark.asyncio
    async def test_missing_data(self):
        store = make_store(RecordingHandler({}))
        with pytest.raises(StoreFailureError):
            await store.get_user("u-1")

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        store = make_store(RecordingHandler(httpx.Response(500, text="oops")))
        with pytest.raises(StoreFailureError) as exc_info:
            await store.list_books()
        assert not isinstance(exc_info.value, StoreConnectionError)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        store = make_store(RecordingHandler(httpx.Response(200, text="not json")))
        with pytest.raises(StoreFailureError):
            await store.list_books()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        store = make_store(RecordingHandler(httpx.ConnectError("refused")))
        with pytest.raises(StoreConnectionError) as exc_info:
            await store.create_reservation(
                "u-1", "b-1", datetime(2024, 1, 27, tzinfo=timezone.utc)
            )
        assert exc_info.value.operation == "create_reservation"

    @pytest.mark.asyncio
    async def test_error_entries_without_message(self):
        store = make_store(RecordingHandler({"errors": ["permission denied"]}))
        with pytest.raises(StoreFailureError) as exc_info:
            await store.get_book("b-1")
        assert "permission denied" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_partial_insert_row_filled_from_request(self):
        store = make_store(
            RecordingHandler(
                {
                    "data": {
                        "insert_reservations_one": {
                            "id": "r-1",
                            "user_id": "u-1",
                            "book_id": "b-1",
                        }
                    }
                }
            )
        )
        expires_at = datetime(2024, 1, 27, tzinfo=timezone.utc)

        reservation = await store.create_reservation("u-1", "b-1", expires_at)

        assert reservation.id == "r-1"
        assert reservation.expires_at == expires_at
        assert reservation.status is ReservationStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_unreadable_insert_row_is_committed(self):
        store = make_store(
            RecordingHandler({"data": {"insert_reservations_one": {"status": "held"}}})
        )
        with pytest.raises(StoreFailureError) as exc_info:
            await store.create_reservation(
                "u-1", "b-1", datetime(2024, 1, 27, tzinfo=timezone.utc)
            )
        assert exc_info.value.committed is True
        assert exc_info.value.operation == "create_reservation"

    @pytest.mark.asyncio
    async def test_null_insert_row_is_not_committed(self):
        store = make_store(
            RecordingHandler({"data": {"insert_reservations_one": None}})
        )
        with pytest.raises(StoreFailureError) as exc_info:
            await store.create_reservation(
                "u-1", "b-1", datetime(2024, 1, 27, tzinfo=timezone.utc)
            )
        assert exc_info.value.committed is False

    @pytest.mark.asyncio
    async def test_null_mutation_result(self):
        store = make_store(RecordingHandler({"data": {"update_reservations_by_pk": None}}))
        with pytest.raises(StoreFailureError):
            await store.update_reservation_status("r-1", ReservationStatus.CANCELLED)


class TestHealthAndClose:
    @pytest.mark.asyncio
    async def test_healthy(self):
        store = make_store(RecordingHandler({"data": {"__typename": "query_root"}}))
        result = await store.health_check()
        assert result.healthy is True
        assert result.store_type == "graphql"

    @pytest.mark.asyncio
    async def test_unhealthy(self):
        store = make_store(RecordingHandler(httpx.ConnectError("refused")))
        result = await store.health_check()
        assert result.healthy is False
        assert "refused" in result.error

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(RecordingHandler()))
        store = GraphQLStore(url=URL, client=client)
        await store.close()
        assert not client.is_closed
        await client.aclose()
