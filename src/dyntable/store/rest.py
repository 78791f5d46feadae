"""HTTP store speaking the PostgREST dialect used by hosted Postgres backends."""

import logging
import uuid
from typing import Any, Dict, List, Optional

import requests

from dyntable.errors import BackingStoreError
from dyntable.store.base import BackingStore, QueryResult, MIGRATION_HINT

logger = logging.getLogger(__name__)

# Postgres "undefined_table" and PostgREST "table not in schema cache"
MISSING_TABLE_CODES = {"42P01", "PGRST205"}


class RestStore(BackingStore):
    """Backing store reached over a PostgREST API.

    Cascade deletes rely on the foreign keys declared in the remote schema.

    Examples:
        store = RestStore("https://xyz.example.co", api_key="service-key")
        result = store.query("custom_tables", order_by="created_at", ascending=False)
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        schema_path: str = "/rest/v1",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the REST store.

        Args:
            url: Base URL of the backend
            api_key: Key sent as both ``apikey`` and bearer token
            schema_path: Path prefix of the REST endpoint
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (mainly for tests)
        """
        self.base_url = url.rstrip("/") + schema_path
        self.api_key = api_key
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                }
            )
        return self._session

    @staticmethod
    def _filter_params(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        params = {}
        for key, value in (filters or {}).items():
            if value is None:
                params[key] = "is.null"
            elif isinstance(value, bool):
                params[key] = f"eq.{str(value).lower()}"
            else:
                params[key] = f"eq.{value}"
        return params

    def _make_request(
        self, method: str, collection: str, **kwargs
    ) -> requests.Response:
        """Send a request and translate failures into BackingStoreError."""
        url = f"{self.base_url}/{collection}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise BackingStoreError(f"Could not reach store for '{collection}': {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json()
            except ValueError:
                detail = {"message": response.text}
            if not isinstance(detail, dict):
                detail = {"message": str(detail)}

            code = detail.get("code")
            message = detail.get("message") or "Unknown error"
            logger.error(f"Store rejected {method} {collection} ({response.status_code}): {message}")

            if code in MISSING_TABLE_CODES or "does not exist" in message:
                raise BackingStoreError(
                    f"Collection '{collection}' does not exist", MIGRATION_HINT
                )
            raise BackingStoreError(
                f"Store rejected {method} on '{collection}' ({response.status_code}): {message}"
            )
        return response

    def insert(self, collection: str, doc: Dict[str, Any]) -> str:
        return self.insert_many(collection, [doc])[0]

    def insert_many(self, collection: str, docs: List[Dict[str, Any]]) -> List[str]:
        if not docs:
            return []
        records = []
        for doc in docs:
            record = dict(doc)
            if not record.get("id"):
                record["id"] = str(uuid.uuid4())
            records.append(record)

        # A single POST of a JSON array is one INSERT statement on the server
        response = self._make_request(
            "POST",
            collection,
            json=records,
            headers={"Prefer": "return=representation"},
        )
        created = response.json() or records
        return [item["id"] for item in created]

    def update(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> None:
        changes = {key: value for key, value in doc.items() if key != "id"}
        if not changes:
            return
        self._make_request(
            "PATCH",
            collection,
            params={"id": f"eq.{doc_id}"},
            json=changes,
            headers={"Prefer": "return=minimal"},
        )

    def delete(self, collection: str, doc_id: str) -> None:
        self.delete_where(collection, {"id": doc_id})

    def delete_where(self, collection: str, filters: Dict[str, Any]) -> int:
        if not filters:
            raise BackingStoreError(
                "Delete requires at least one filter to prevent accidental deletion of all documents"
            )
        response = self._make_request(
            "DELETE",
            collection,
            params=self._filter_params(filters),
            headers={"Prefer": "return=representation"},
        )
        deleted = response.json() if response.content else []
        return len(deleted)

    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> QueryResult:
        params = {"select": "*", **self._filter_params(filters)}
        if order_by:
            params["order"] = f"{order_by}.{'asc' if ascending else 'desc'}"
        if offset:
            params["offset"] = str(offset)
        if limit is not None:
            params["limit"] = str(limit)

        response = self._make_request(
            "GET", collection, params=params, headers={"Prefer": "count=exact"}
        )
        items = response.json() or []
        return QueryResult(
            items=items,
            total_count=self._parse_total(response.headers.get("Content-Range"), len(items)),
        )

    @staticmethod
    def _parse_total(content_range: Optional[str], fallback: int) -> int:
        """Read the exact count from a ``Content-Range: 0-9/42`` header."""
        if not content_range or "/" not in content_range:
            return fallback
        total = content_range.rsplit("/", 1)[1]
        return int(total) if total.isdigit() else fallback

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
