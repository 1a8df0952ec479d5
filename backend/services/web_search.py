"""Web search through the Firecrawl search API."""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from config import (
    FIRECRAWL_API_KEY,
    FIRECRAWL_API_URL,
    WEB_SEARCH_LIMIT,
    WEB_SNIPPET_LENGTH,
    WEB_CONTEXT_LENGTH,
    WEB_SEARCH_TIMEOUT,
)

logger = logging.getLogger(__name__)


@dataclass
class WebSource:
    """A web page cited in a deep-search answer."""
    url: str
    title: str
    snippet: str


@dataclass
class WebSearchResult:
    """Scraped web context plus the sources it came from."""
    context: str = ""
    sources: List[WebSource] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.context and not self.sources


class WebSearchClient:
    """
    Search the web and scrape result pages as markdown.

    Web search is optional: without an API key, or when Firecrawl fails, the
    client returns an empty result instead of raising so the caller can carry
    on with document context only.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = FIRECRAWL_API_URL,
        timeout: float = WEB_SEARCH_TIMEOUT
    ):
        self.api_key = api_key if api_key is not None else FIRECRAWL_API_KEY
        self.api_url = api_url
        self.timeout = timeout

        if not self.api_key:
            logger.info("FIRECRAWL_API_KEY not set, web search disabled")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def search(self, query: str, limit: int = WEB_SEARCH_LIMIT) -> WebSearchResult:
        """
        Run a web search.

        Args:
            query: Search query (the user's question)
            limit: Maximum number of results

        Returns:
            WebSearchResult, empty when search is disabled or fails
        """
        if not self.enabled:
            return WebSearchResult()

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "query": query,
            "limit": limit,
            "scrapeOptions": {"formats": ["markdown"]}
        }

        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.api_url, headers=headers, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException:
            logger.error(f"Web search timed out after {self.timeout}s")
            return WebSearchResult()
        except httpx.HTTPStatusError as e:
            logger.error(f"Web search failed with status {e.response.status_code}")
            return WebSearchResult()
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Web search error: {e}")
            return WebSearchResult()

        if not body.get("success") or not body.get("data"):
            logger.info("Web search returned no results")
            return WebSearchResult()

        result = self.parse_results(body["data"])
        logger.info(f"Web search returned {len(result.sources)} sources")
        return result

    @staticmethod
    def parse_results(items: List[Dict[str, Any]]) -> WebSearchResult:
        """
        Turn raw Firecrawl results into sources and prompt context.

        A result is cited only when it has both a URL and a title; its scraped
        markdown feeds the context whenever present.
        """
        sources: List[WebSource] = []
        sections: List[str] = []

        for item in items:
            metadata = item.get("metadata") or {}
            url = item.get("url")
            title = metadata.get("title") or item.get("title")
            markdown = item.get("markdown") or ""

            if url and title:
                snippet = markdown or metadata.get("description") or item.get("description") or ""
                sources.append(WebSource(
                    url=url,
                    title=title,
                    snippet=snippet[:WEB_SNIPPET_LENGTH]
                ))

            if markdown:
                label = title or url
                sections.append(f"[Web Source: {label}]\n{markdown[:WEB_CONTEXT_LENGTH]}")

        return WebSearchResult(context="\n\n".join(sections), sources=sources)
