# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
GraphQLStore for the Library Reservation Engine

This module provides a store that talks to a remote Hasura-style GraphQL
endpoint over HTTP using httpx.

Key Features:
- Pooled async HTTP client, created lazily or injected by the caller
- Admin secret and bearer token headers for the endpoint
- GraphQL ``errors`` payloads and missing data surfaced as StoreFailureError
- Transport failures surfaced as StoreConnectionError
"""

import logging
import os
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

import httpx

from ..exceptions import ConfigurationError, StoreConnectionError, StoreFailureError
from ..types.book import Book
from ..types.policy import ReservationPolicy
from ..types.reservation import Reservation, ReservationStatus, format_timestamp
from ..types.user import User
from . import queries
from .base import BaseStore, HealthCheckResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GraphQLStore(BaseStore):
    """
    A data store backed by a remote GraphQL endpoint.

    Every call is a single POST of ``{"query", "variables"}``. The store does
    not retry; a failed call raises and the caller decides what to do.
    """

    store_type = "graphql"

    def __init__(
        self,
        url: str | None = None,
        admin_secret: str | None = None,
        auth_token: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the GraphQL store.

        Args:
            url: GraphQL endpoint URL. Falls back to the LIBRARY_GRAPHQL_URL
                environment variable.
            admin_secret: Optional Hasura admin secret. Falls back to the
                LIBRARY_GRAPHQL_ADMIN_SECRET environment variable.
            auth_token: Optional bearer token from the session store
            headers: Extra headers sent with every request
            timeout: Request timeout in seconds
            client: Optional pre-configured httpx.AsyncClient (not closed by
                this store)

        Raises:
            ConfigurationError: If no endpoint URL is available
        """
        self.url = url or os.environ.get("LIBRARY_GRAPHQL_URL")
        if not self.url:
            raise ConfigurationError(
                "GraphQLStore requires a url or the LIBRARY_GRAPHQL_URL environment variable"
            )
        self.timeout = timeout

        self._headers: dict[str, str] = {"Content-Type": "application/json"}
        secret = admin_secret or os.environ.get("LIBRARY_GRAPHQL_ADMIN_SECRET")
        if secret:
            self._headers["x-hasura-admin-secret"] = secret
        if auth_token:
            self._headers["Authorization"] = f"Bearer {auth_token}"
        if headers:
            self._headers.update(headers)

        self._client = client
        self._owned_client = client is None

        logger.debug(f"Initialized GraphQLStore for endpoint '{self.url}'")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
            )
        return self._client

    async def execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
        operation: str = "query",
    ) -> dict[str, Any]:
        """
        Execute a GraphQL document and return its ``data`` object.

        Args:
            document: Query or mutation text
            variables: Variables for the document
            operation: Store operation name used in error reporting

        Raises:
            StoreConnectionError: If the endpoint could not be reached
            StoreFailureError: On HTTP errors, GraphQL errors, or a response
                without data
        """
        client = self._get_client()
        try:
            response = await client.post(
                self.url,  # type: ignore[arg-type]
                json={"query": document, "variables": variables or {}},
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"GraphQL transport error during {operation}: {e}")
            raise StoreConnectionError(
                f"Failed to reach GraphQL endpoint during {operation}: {e}",
                operation=operation,
            ) from e

        if response.status_code >= 400:
            raise StoreFailureError(
                f"GraphQL endpoint returned HTTP {response.status_code} during {operation}",
                operation=operation,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise StoreFailureError(
                f"GraphQL endpoint returned invalid JSON during {operation}",
                operation=operation,
            ) from e

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = ", ".join(
                str(error.get("message", error) if isinstance(error, dict) else error)
                for error in errors
            )
            logger.error(f"GraphQL errors during {operation}: {messages}")
            raise StoreFailureError(
                f"GraphQL errors: {messages}",
                operation=operation,
            )

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise StoreFailureError(
                f"No data returned from {operation}",
                operation=operation,
            )
        return data

    def _parse(
        self,
        factory: Callable[[dict[str, Any]], T],
        record: Any,
        operation: str,
    ) -> T:
        """Convert a response row, reporting malformed rows as StoreFailureError."""
        if not isinstance(record, dict):
            raise StoreFailureError(
                f"No record returned from {operation}", operation=operation
            )
        try:
            return factory(record)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailureError(
                f"Malformed record returned from {operation}: {e}",
                operation=operation,
            ) from e

    def _parse_list(
        self,
        factory: Callable[[dict[str, Any]], T],
        records: Any,
        operation: str,
    ) -> list[T]:
        if not isinstance(records, list):
            raise StoreFailureError(
                f"Expected a list from {operation}", operation=operation
            )
        return [self._parse(factory, record, operation) for record in records]

    # ==========================================================================
    # Books
    # ==========================================================================

    async def get_book(self, book_id: str) -> Book | None:
        data = await self.execute(
            queries.GET_BOOK_QUERY, {"bookId": book_id}, operation="get_book"
        )
        record = data.get("books_by_pk")
        if record is None:
            return None
        return self._parse(Book.from_record, record, "get_book")

    async def list_books(
        self,
        search: str | None = None,
        available_only: bool = False,
    ) -> list[Book]:
        conditions: list[dict[str, Any]] = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                {
                    "_or": [
                        {"title": {"_ilike": pattern}},
                        {"author": {"_ilike": pattern}},
                    ]
                }
            )
        if available_only:
            conditions.append({"available_copies": {"_gt": 0}})
        data = await self.execute(
            queries.LIST_BOOKS_QUERY,
            {"where": {"_and": conditions}},
            operation="list_books",
        )
        return self._parse_list(Book.from_record, data.get("books"), "list_books")

    async def update_book_availability(
        self, book_id: str, available_copies: int
    ) -> Book:
        data = await self.execute(
            queries.UPDATE_BOOK_AVAILABILITY_MUTATION,
            {
                "bookId": book_id,
                "availableCopies": available_copies,
                "available": available_copies > 0,
            },
            operation="update_book_availability",
        )
        return self._parse(
            Book.from_record,
            data.get("update_books_by_pk"),
            "update_book_availability",
        )

    # ==========================================================================
    # Users and Policies
    # ==========================================================================

    async def get_user(self, user_id: str) -> User | None:
        data = await self.execute(
            queries.GET_USER_QUERY, {"userId": user_id}, operation="get_user"
        )
        record = data.get("users_by_pk")
        if record is None:
            return None
        return self._parse(User.from_record, record, "get_user")

    async def get_reservation_policies(self) -> dict[str, ReservationPolicy]:
        data = await self.execute(
            queries.GET_RESERVATION_POLICIES_QUERY,
            operation="get_reservation_policies",
        )
        rows = self._parse_list(
            lambda record: (
                str(record["user_type"]),
                ReservationPolicy.from_record(record),
            ),
            data.get("reservation_policies"),
            "get_reservation_policies",
        )
        return dict(rows)

    # ==========================================================================
    # Reservations
    # ==========================================================================

    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        data = await self.execute(
            queries.GET_RESERVATION_QUERY,
            {"reservationId": reservation_id},
            operation="get_reservation",
        )
        record = data.get("reservations_by_pk")
        if record is None:
            return None
        return self._parse(Reservation.from_record, record, "get_reservation")

    async def list_reservations(
        self,
        user_id: str,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        where: dict[str, Any] = {"user_id": {"_eq": user_id}}
        if status is not None:
            where["status"] = {"_eq": status.value}
        data = await self.execute(
            queries.LIST_RESERVATIONS_QUERY,
            {"where": where},
            operation="list_reservations",
        )
        return self._parse_list(
            Reservation.from_record, data.get("reservations"), "list_reservations"
        )

    async def count_active_reservations(self, user_id: str) -> int:
        data = await self.execute(
            queries.COUNT_ACTIVE_RESERVATIONS_QUERY,
            {"userId": user_id},
            operation="count_active_reservations",
        )
        try:
            return int(data["reservations_aggregate"]["aggregate"]["count"])
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailureError(
                f"Malformed aggregate returned from count_active_reservations: {e}",
                operation="count_active_reservations",
            ) from e

    async def create_reservation(
        self, user_id: str, book_id: str, expires_at: datetime
    ) -> Reservation:
        variables = {
            "userId": user_id,
            "bookId": book_id,
            "expiresAt": format_timestamp(expires_at),
        }
        logger.debug(f"Creating reservation with variables: {variables}")
        data = await self.execute(
            queries.CREATE_RESERVATION_MUTATION,
            variables,
            operation="create_reservation",
        )
        record = data.get("insert_reservations_one")
        if not isinstance(record, dict):
            return self._parse(Reservation.from_record, record, "create_reservation")

        # The row was inserted; fill columns the response left out
        defaults = {"user_id": user_id, "book_id": book_id, "expires_at": expires_at}
        try:
            return Reservation.from_record(record, defaults=defaults)
        except (KeyError, TypeError, ValueError) as e:
            raise StoreFailureError(
                f"Reservation was inserted but the returned row is malformed: {e}",
                operation="create_reservation",
                committed=True,
            ) from e

    async def update_reservation_status(
        self, reservation_id: str, status: ReservationStatus
    ) -> Reservation:
        data = await self.execute(
            queries.UPDATE_RESERVATION_STATUS_MUTATION,
            {"reservationId": reservation_id, "status": status.value},
            operation="update_reservation_status",
        )
        return self._parse(
            Reservation.from_record,
            data.get("update_reservations_by_pk"),
            "update_reservation_status",
        )

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def health_check(self) -> HealthCheckResult:
        try:
            await self.execute(queries.HEALTH_CHECK_QUERY, operation="health_check")
        except StoreFailureError as e:
            return HealthCheckResult(
                healthy=False,
                store_type=self.store_type,
                error=str(e),
                metadata={"url": self.url},
            )
        return HealthCheckResult(
            healthy=True, store_type=self.store_type, metadata={"url": self.url}
        )

    async def close(self) -> None:
        if self._client is not None and self._owned_client:
            await self._client.aclose()
            self._client = None
