"""Read/write access to the music tables, whatever their shape.

Two interchangeable backends implement the same contract:

* ``DatabaseTableBackend`` talks to a Django database connection directly.
* ``HttpTableBackend`` talks to a running instance through the JSON API.

The read side (``list_tables``/``read_table``) is best effort: failures are
logged and surface as empty results. The write side (``insert_row``) raises
``BackendError`` subclasses because it is always driven by an explicit
request.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests
from django.apps import apps
from django.conf import settings
from django.core.exceptions import FieldDoesNotExist, ValidationError
from django.db import DatabaseError, connection as default_connection, transaction
from requests import RequestException

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

DEFAULT_ROW_LIMIT = 10
MAX_ROW_LIMIT = 50
DEFAULT_INTERNAL_PREFIXES = ("django_", "auth_", "sqlite_")


class BackendError(Exception):
    """Raised when a write against the table backend cannot be completed."""


class UnknownTableError(BackendError):
    """The named table is not one the backend exposes."""


class InvalidRowError(BackendError):
    """The row payload does not fit the target table."""


def _get_setting(name: str, default=None):
    if settings.configured and hasattr(settings, name):
        return getattr(settings, name)
    return os.getenv(name, default)


def clamp_limit(limit: Optional[int]) -> int:
    """Return a usable row limit, falling back to the configured default."""
    if limit is None:
        limit = _get_setting("SHELVES_ROW_LIMIT", DEFAULT_ROW_LIMIT)
    try:
        value = int(limit)
    except (TypeError, ValueError):
        value = DEFAULT_ROW_LIMIT
    return max(1, min(value, MAX_ROW_LIMIT))


def is_internal_table(name: str, prefixes: Iterable[str] = DEFAULT_INTERNAL_PREFIXES) -> bool:
    """True for sequences and framework bookkeeping tables."""
    lowered = (name or "").lower()
    if not lowered or "_seq" in lowered:
        return True
    return any(lowered.startswith(prefix) for prefix in prefixes)


class DatabaseTableBackend:
    """Table backend bound to an explicit Django database connection."""

    def __init__(
        self,
        connection=None,
        *,
        internal_prefixes: Optional[Iterable[str]] = None,
        ordering: Optional[Mapping[str, str]] = None,
    ):
        self.connection = connection if connection is not None else default_connection
        if internal_prefixes is None:
            internal_prefixes = _get_setting(
                "SHELVES_INTERNAL_TABLE_PREFIXES", DEFAULT_INTERNAL_PREFIXES
            )
        self.internal_prefixes = tuple(internal_prefixes)
        if ordering is None:
            ordering = _get_setting("SHELVES_TABLE_ORDERING", {}) or {}
        self.ordering = dict(ordering)

    def list_tables(self) -> List[str]:
        """Return user-facing table names, or ``[]`` if the database is unreachable."""
        try:
            with self.connection.cursor() as cursor:
                names = self.connection.introspection.table_names(cursor)
        except DatabaseError as exc:
            logger.warning("Unable to list tables: %s", exc)
            return []
        return [name for name in names if not is_internal_table(name, self.internal_prefixes)]

    def describe_table(self, table: str) -> List[Dict[str, str]]:
        """Return ``[{name, type}]`` for each column of ``table``."""
        introspection = self.connection.introspection
        try:
            with self.connection.cursor() as cursor:
                description = introspection.get_table_description(cursor, table)
        except DatabaseError as exc:
            logger.warning("Unable to describe table %s: %s", table, exc)
            return []

        columns: List[Dict[str, str]] = []
        for info in description:
            try:
                field_type = introspection.get_field_type(info.type_code, info)
            except KeyError:
                field_type = str(info.type_code)
            columns.append({"name": info.name, "type": field_type})
        return columns

    def read_table(self, table: str, limit: Optional[int] = None) -> List[Row]:
        """Return up to ``limit`` rows of ``table`` as dicts.

        Unknown tables and database failures yield ``[]``; this never raises.
        """
        if table not in self.list_tables():
            logger.warning("Refusing to read unknown table %r", table)
            return []

        quote = self.connection.ops.quote_name
        sql = f"SELECT * FROM {quote(table)}"
        order_clause = self._order_clause(table)
        if order_clause:
            sql += f" ORDER BY {order_clause}"
        sql += " LIMIT %s"

        try:
            with self.connection.cursor() as cursor:
                cursor.execute(sql, [clamp_limit(limit)])
                columns = [col[0] for col in cursor.description]
                rows = cursor.fetchall()
        except DatabaseError as exc:
            logger.error("Error fetching from table %s: %s", table, exc)
            return []

        return [dict(zip(columns, row)) for row in rows]

    def _order_clause(self, table: str) -> str:
        order_by = self.ordering.get(table)
        if not order_by:
            return ""
        column = order_by.lstrip("-")
        known = {col["name"] for col in self.describe_table(table)}
        if column not in known:
            logger.debug("Ignoring ordering %s for %s: no such column", order_by, table)
            return ""
        direction = "DESC" if order_by.startswith("-") else "ASC"
        return f"{self.connection.ops.quote_name(column)} {direction}"

    def insert_row(self, table: str, data: Mapping[str, Any]) -> Row:
        """Insert one row and return what was written.

        Tables owned by a Django model go through the ORM so model defaults
        apply; any other table gets a plain parameterised INSERT.
        """
        if not isinstance(data, Mapping) or not data:
            raise InvalidRowError("Row data must be a non-empty object")
        if table not in self.list_tables():
            raise UnknownTableError(f"Unknown table: {table}")

        model = _model_for_table(table)
        try:
            with transaction.atomic(using=self.connection.alias):
                if model is not None:
                    return _insert_with_model(model, data, using=self.connection.alias)
                return self._insert_raw(table, data)
        except DatabaseError as exc:
            logger.error("Error adding row to %s: %s", table, exc)
            raise BackendError(f"Failed to add row to {table}") from exc

    def _insert_raw(self, table: str, data: Mapping[str, Any]) -> Row:
        known = {col["name"] for col in self.describe_table(table)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidRowError(f"Unknown columns for {table}: {', '.join(unknown)}")

        quote = self.connection.ops.quote_name
        columns = list(data)
        sql = "INSERT INTO {} ({}) VALUES ({})".format(
            quote(table),
            ", ".join(quote(col) for col in columns),
            ", ".join(["%s"] * len(columns)),
        )
        with self.connection.cursor() as cursor:
            cursor.execute(sql, [data[col] for col in columns])
        return dict(data)


def _model_for_table(table: str):
    for model in apps.get_models():
        if model._meta.db_table == table:
            return model
    return None


def _insert_with_model(model, data: Mapping[str, Any], using: str) -> Row:
    values: Row = {}
    for key, value in data.items():
        try:
            field = model._meta.get_field(key)
        except FieldDoesNotExist:
            field = next(
                (f for f in model._meta.concrete_fields if f.column == key),
                None,
            )
        if field is None or not field.concrete or field.primary_key:
            raise InvalidRowError(f"Unknown column for {model._meta.db_table}: {key}")
        values[field.attname] = value

    instance = model(**values)
    try:
        instance.full_clean()
    except ValidationError as exc:
        raise InvalidRowError(f"Invalid row for {model._meta.db_table}: {exc.message_dict}") from exc
    instance.save(using=using)
    return {field.column: field.value_from_object(instance) for field in model._meta.concrete_fields}


class HttpTableBackend:
    """Table backend that reads a remote instance's ``/api/db/`` endpoints."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def list_tables(self) -> List[str]:
        payload = self._get_json("/api/db/tables/")
        tables = payload.get("tables") if isinstance(payload, dict) else None
        if not isinstance(tables, list):
            return []
        return [str(name) for name in tables if name]

    def read_table(self, table: str, limit: Optional[int] = None) -> List[Row]:
        params = {"table": table, "limit": clamp_limit(limit)}
        payload = self._get_json("/api/db/", params=params)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            return []
        return [row for row in data if isinstance(row, dict)]

    def insert_row(self, table: str, data: Mapping[str, Any]) -> Row:
        try:
            response = self.session.post(
                f"{self.base_url}/api/db/",
                json={"table": table, "data": dict(data)},
                timeout=self.timeout,
            )
        except RequestException as exc:
            raise BackendError(f"Failed to add row to {table}: {exc}") from exc

        if response.status_code == 400:
            raise InvalidRowError(_error_message(response) or f"Rejected row for {table}")
        if response.status_code not in (200, 201):
            raise BackendError(_error_message(response) or f"HTTP error {response.status_code}")
        return dict(data)

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            return {}
        if response.status_code != 200:
            logger.warning("Request to %s returned HTTP %s", url, response.status_code)
            return {}
        try:
            return response.json()
        except ValueError:
            logger.warning("Request to %s returned invalid JSON", url)
            return {}


def _error_message(response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict):
        return str(payload.get("error") or "")
    return ""


def get_default_backend() -> DatabaseTableBackend:
    """Backend bound to the default Django database."""
    return DatabaseTableBackend()
