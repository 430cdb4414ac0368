"""Remote document store over a REST document API."""

from typing import Any

import httpx

from travelpulse.storage.documents import (
    DocumentKey,
    MalformedDocumentError,
    StorageUnavailableError,
    sanitize_document,
)


class HttpDocumentStore:
    """Remote implementation of DocumentStore.

    Endpoint layout:
    - GET/PUT/DELETE {base_url}/{collection}/{document_id}
    - GET {base_url}/{collection} -> JSON list of documents (or {"documents": [...]})
    - GET {base_url}/ -> reachability check

    404 on a document means absent. Any other non-2xx status or transport error
    raises StorageUnavailableError.
    """

    name = "remote"

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 4.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize remote store.

        Args:
            base_url: Document API base URL
            token: Optional bearer token
            timeout: Per-request timeout in seconds
            client: Optional httpx client (for testing with mocks)
        """
        self._base_url = base_url.rstrip("/")
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._headers = headers

    def _url(self, *parts: str) -> str:
        return "/".join([self._base_url, *parts])

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, headers=self._headers, **kwargs)
        except httpx.HTTPError as e:
            raise StorageUnavailableError(f"{method} {url} failed: {type(e).__name__}") from e
        if response.status_code == 404 and method in ("GET", "DELETE"):
            return response
        if response.is_error:
            raise StorageUnavailableError(f"{method} {url} returned {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise MalformedDocumentError(f"Unparseable payload for {what}") from e

    async def ping(self) -> bool:
        """Check the remote store is reachable. Returns False instead of raising."""
        try:
            await self._request("GET", self._url(""))
        except StorageUnavailableError:
            return False
        return True

    async def read(self, key: DocumentKey) -> dict[str, Any] | None:
        """Read one document."""
        response = await self._request("GET", self._url(key.collection, key.document_id))
        if response.status_code == 404:
            return None
        data = self._json(response, str(key))
        if data is None:
            return None
        if not isinstance(data, dict):
            raise MalformedDocumentError(f"Document {key} is not an object")
        return data

    async def write(self, key: DocumentKey, document: dict[str, Any]) -> bool:
        """Replace one document (PUT, no merge)."""
        await self._request(
            "PUT",
            self._url(key.collection, key.document_id),
            json=sanitize_document(document),
        )
        return True

    async def list_collection(self, collection: str) -> list[dict[str, Any]]:
        """List documents in a collection."""
        response = await self._request("GET", self._url(collection))
        if response.status_code == 404:
            return []
        data = self._json(response, collection)
        if isinstance(data, dict):
            data = data.get("documents", [])
        if not isinstance(data, list):
            raise MalformedDocumentError(f"Collection {collection} is not a list")
        return [doc for doc in data if isinstance(doc, dict)]

    async def delete(self, key: DocumentKey) -> bool:
        """Delete one document; 404 counts as already deleted."""
        await self._request("DELETE", self._url(key.collection, key.document_id))
        return True

    async def close(self) -> None:
        """Close the underlying client if this store created it."""
        if self._owns_client:
            await self._client.aclose()
