"""
Knowledge Retrieval Service adapter (Vectorize RAG pipeline).

``search`` is best-effort: any transport, HTTP or decoding error is logged
and replaced by a placeholder string, so callers always get text back.
"""

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

NO_DOCUMENTS_FOUND = "No relevant documents found."
RETRIEVAL_UNAVAILABLE = "Unable to retrieve relevant documents at this time."


class KnowledgeRetrievalService(Protocol):
    async def search(self, query: str) -> str:
        ...


class VectorizeRetrievalService:
    """Query a Vectorize retrieval pipeline over HTTP.

    Parameters
    ----------
    client:
        Shared ``httpx.AsyncClient``; its lifecycle belongs to the caller.
    base_url, org_id, pipeline_id, access_token:
        Vectorize pipeline coordinates.  When any of them is empty every
        search returns the unavailable placeholder.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        base_url: str,
        org_id: str,
        pipeline_id: str,
        access_token: str,
        num_results: int = 5,
        timeout: float = 10.0,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.org_id = org_id
        self.pipeline_id = pipeline_id
        self.access_token = access_token
        self.num_results = num_results
        self.timeout = timeout

    @property
    def retrieval_url(self) -> str:
        return f"{self.base_url}/org/{self.org_id}/pipelines/{self.pipeline_id}/retrieval"

    async def retrieve_documents(self, query: str) -> list[dict[str, Any]]:
        if not (self.org_id and self.pipeline_id and self.access_token):
            raise RuntimeError("Vectorize retrieval is not configured")

        response = await self.client.post(
            self.retrieval_url,
            json={"question": query, "numResults": self.num_results},
            headers={
                "Authorization": self.access_token,
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Unexpected retrieval response shape")
        documents = payload.get("documents") or []
        return [doc for doc in documents if isinstance(doc, dict)]

    @staticmethod
    def format_documents_for_context(documents: list[dict[str, Any]]) -> str:
        """Join document texts, highest relevancy first."""
        ranked = sorted(
            documents,
            key=lambda d: d.get("relevancy", d.get("similarity", 0)) or 0,
            reverse=True,
        )
        return "\n\n".join(
            str(doc["text"]).strip() for doc in ranked if doc.get("text")
        )

    async def search(self, query: str) -> str:
        try:
            documents = await self.retrieve_documents(query)
        except (httpx.HTTPError, ValueError, RuntimeError) as e:
            logger.warning("Retrieval failed for %r: %s", query, e)
            return RETRIEVAL_UNAVAILABLE
        return self.format_documents_for_context(documents) or NO_DOCUMENTS_FOUND
