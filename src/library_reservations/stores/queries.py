# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
GraphQL documents used by GraphQLStore.

The documents target a Hasura-style schema with ``books``, ``users``,
``reservations`` and ``reservation_policies`` tables. Filters are passed as
``*_bool_exp`` variables so optional criteria can be omitted.
"""

BOOK_FIELDS = """
    id
    title
    author
    isbn
    available
    total_copies
    available_copies
"""

RESERVATION_FIELDS = """
    id
    user_id
    book_id
    expires_at
    status
    created_at
"""

GET_BOOK_QUERY = f"""
query GetBook($bookId: uuid!) {{
  books_by_pk(id: $bookId) {{{BOOK_FIELDS}  }}
}}
"""

LIST_BOOKS_QUERY = f"""
query GetBooks($where: books_bool_exp!) {{
  books(where: $where, order_by: {{ title: asc }}) {{{BOOK_FIELDS}  }}
}}
"""

GET_USER_QUERY = """
query GetUser($userId: uuid!) {
  users_by_pk(id: $userId) {
    id
    email
    name
    user_type
    created_at
  }
}
"""

GET_RESERVATION_POLICIES_QUERY = """
query GetReservationPolicies {
  reservation_policies(where: { is_active: { _eq: true } }) {
    id
    user_type
    max_reservations
    reservation_duration_days
    is_active
  }
}
"""

GET_RESERVATION_QUERY = f"""
query GetReservation($reservationId: uuid!) {{
  reservations_by_pk(id: $reservationId) {{{RESERVATION_FIELDS}  }}
}}
"""

LIST_RESERVATIONS_QUERY = f"""
query GetUserReservations($where: reservations_bool_exp!) {{
  reservations(where: $where, order_by: {{ expires_at: desc }}) {{{RESERVATION_FIELDS}
    book {{
      id
      title
      author
      isbn
    }}
  }}
}}
"""

COUNT_ACTIVE_RESERVATIONS_QUERY = """
query CountActiveReservations($userId: uuid!) {
  reservations_aggregate(
    where: { user_id: { _eq: $userId }, status: { _eq: "active" } }
  ) {
    aggregate {
      count
    }
  }
}
"""

CREATE_RESERVATION_MUTATION = f"""
mutation CreateReservation($userId: uuid!, $bookId: uuid!, $expiresAt: timestamp!) {{
  insert_reservations_one(object: {{
    user_id: $userId,
    book_id: $bookId,
    expires_at: $expiresAt
  }}) {{{RESERVATION_FIELDS}  }}
}}
"""

UPDATE_RESERVATION_STATUS_MUTATION = f"""
mutation UpdateReservationStatus($reservationId: uuid!, $status: String!) {{
  update_reservations_by_pk(
    pk_columns: {{ id: $reservationId }},
    _set: {{ status: $status }}
  ) {{{RESERVATION_FIELDS}  }}
}}
"""

UPDATE_BOOK_AVAILABILITY_MUTATION = f"""
mutation UpdateBookAvailability(
  $bookId: uuid!, $availableCopies: Int!, $available: Boolean!
) {{
  update_books_by_pk(
    pk_columns: {{ id: $bookId }},
    _set: {{ available_copies: $availableCopies, available: $available }}
  ) {{{BOOK_FIELDS}  }}
}}
"""

HEALTH_CHECK_QUERY = """
query HealthCheck {
  __typename
}
"""
