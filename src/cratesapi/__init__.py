from cratesapi.client import BASE_URL, Client
from cratesapi.errors import (
    ClientConfigError,
    CratesError,
    DeserializationError,
    HttpStatusError,
    NotFoundError,
    QueryError,
    QueryParseError,
    TransportError,
)
from cratesapi.query import Category, Query, Sorting, parse_query
from cratesapi.ratelimit import RATE_LIMIT

__all__ = [
    "BASE_URL",
    "RATE_LIMIT",
    "Client",
    "Query",
    "Category",
    "Sorting",
    "parse_query",
    "CratesError",
    "ClientConfigError",
    "QueryError",
    "QueryParseError",
    "TransportError",
    "HttpStatusError",
    "NotFoundError",
    "DeserializationError",
]
