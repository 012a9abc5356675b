"""
Tool: Resource Search
Purpose: Search for local assistance resources and rank them for someone in recovery

Usage:
    python -m lifeos.pathfinder.search --query "grants and assistance" --category Housing --zip 08096

Dependencies:
    - httpx (Tavily search REST API)
    - openai (ranking and enrichment, optional at runtime)

Output:
    JSON SearchResult
"""

import argparse
import json
import logging
from typing import Any

import httpx
from openai import OpenAI

from lifeos.config import get_secret, get_section

from . import NO_RESULTS_MESSAGE, TAVILY_SEARCH_URL
from .models import Opportunity, RankedOpportunities, SearchResult


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
SNIPPET_LENGTH = 100


class SearchError(Exception):
    """Raised when the search backend cannot be reached or rejects the query."""


class TavilyClient:
    """
    Minimal client for the Tavily search API.

    Args:
        api_key: Tavily API key
        http_client: Optional httpx client (tests pass one with a mock transport)
        timeout: Request timeout in seconds
    """

    def __init__(self, api_key: str, http_client: httpx.Client | None = None, timeout: float = 15.0):
        self.api_key = api_key
        self._http = http_client
        self.timeout = timeout

    def search(
        self,
        query: str,
        max_results: int = 5,
        search_depth: str = "basic",
        include_answer: bool = True,
    ) -> dict[str, Any]:
        """Run a search. Returns Tavily's JSON (``results`` and ``answer``)."""
        payload = {
            "query": query,
            "search_depth": search_depth,
            "max_results": max_results,
            "include_answer": include_answer,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            if self._http is not None:
                response = self._http.post(TAVILY_SEARCH_URL, json=payload, headers=headers)
                response.raise_for_status()
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(TAVILY_SEARCH_URL, json=payload, headers=headers)
                    response.raise_for_status()
        except httpx.HTTPError as e:
            raise SearchError(f"Tavily search failed: {e}") from e

        return response.json()


def build_query(query: str, category: str, zip_code: str | None = None) -> str:
    """Compose the full search query sent to the search backend."""
    location_part = f"in {zip_code}" if zip_code else ""
    parts = [f"{category} opportunities", location_part, query, "for people in recovery"]
    return " ".join(part for part in parts if part)


def raw_opportunities(results: list[dict[str, Any]]) -> list[Opportunity]:
    """Map unranked search hits onto the opportunity shape."""
    opportunities = []
    for hit in results:
        if not isinstance(hit, dict):
            continue
        content = str(hit.get("content") or "")
        opportunities.append(
            Opportunity(
                title=str(hit.get("title") or hit.get("url") or "Untitled"),
                url=str(hit.get("url") or ""),
                match_reason=content[:SNIPPET_LENGTH] + "...",
                effort_level="Med",
            )
        )
    return opportunities


def build_ranking_prompt(category: str, results: list[dict[str, Any]]) -> str:
    schema = json.dumps(RankedOpportunities.model_json_schema(), indent=2)
    return f"""Analyze these search results for a user in recovery looking for {category}.

Search Results:
{json.dumps(results)}

Task:
1. Select the most relevant opportunities.
2. Extract the deadline (if any).
3. Estimate the effort level (Low/Med/High).
4. Write a short "Match Reason" explaining why it helps.
5. Ensure the URL matches the source.

Respond with a single JSON object matching this JSON schema:
{schema}
"""


def rank_results(
    client: OpenAI, category: str, results: list[dict[str, Any]], model: str = DEFAULT_MODEL
) -> RankedOpportunities:
    """Ask the model to select, annotate and summarize search hits."""
    response = client.chat.completions.create(
        model=model,
        response_format={"type": "json_object"},
        messages=[{"role": "user", "content": build_ranking_prompt(category, results)}],
    )
    content = response.choices[0].message.content or ""
    return RankedOpportunities.model_validate_json(content)


def search_resources(
    query: str,
    category: str,
    zip_code: str | None = None,
    search_client: TavilyClient | None = None,
    llm_client: OpenAI | None = None,
) -> SearchResult:
    """
    Search for resources and rank them when a model is available.

    Args:
        query: Free-text need, e.g. "grants and assistance"
        category: Resource category, e.g. "Housing"
        zip_code: Optional location code
        search_client: Search backend (built from TAVILY_API_KEY when omitted)
        llm_client: OpenAI client (built from OPENAI_API_KEY when omitted)

    Returns:
        SearchResult - never raises for collaborator failures
    """
    config = get_section("pathfinder")
    full_query = build_query(query, category, zip_code)

    try:
        if search_client is None:
            api_key = get_secret("TAVILY_API_KEY")
            if not api_key:
                raise SearchError("TAVILY_API_KEY is not set")
            search_client = TavilyClient(api_key, timeout=config.get("timeout_seconds", 15.0))

        logger.info(f"Searching for: {full_query}")
        search_response = search_client.search(
            full_query,
            max_results=config.get("max_results", 5),
            search_depth=config.get("search_depth", "basic"),
            include_answer=True,
        )
        if not isinstance(search_response, dict):
            raise SearchError(f"Unexpected search response: {type(search_response).__name__}")
    except Exception as e:
        logger.error(f"Pathfinder search error: {e}")
        return SearchResult(results=[], answer=NO_RESULTS_MESSAGE)

    hits = search_response.get("results") or []
    if not isinstance(hits, list):
        hits = []
    answer = search_response.get("answer")
    if not isinstance(answer, str):
        answer = None

    if llm_client is None:
        api_key = get_secret("OPENAI_API_KEY")
        if not api_key:
            logger.warning("Missing OPENAI_API_KEY, returning raw results mapped to schema.")
            return SearchResult(results=raw_opportunities(hits), answer=answer)
        llm_client = OpenAI(api_key=api_key)

    try:
        ranked = rank_results(llm_client, category, hits, model=config.get("model", DEFAULT_MODEL))
    except Exception as e:
        logger.warning(f"Ranking failed, returning raw results: {e}")
        return SearchResult(results=raw_opportunities(hits), answer=answer)

    return SearchResult(
        results=ranked.opportunities,
        answer=ranked.summary or answer,
        ranked=True,
    )


def main():
    parser = argparse.ArgumentParser(description="Resource Search")
    parser.add_argument("--query", required=True, help="What the user needs")
    parser.add_argument("--category", required=True, help="Resource category")
    parser.add_argument("--zip", help="Zip code")

    args = parser.parse_args()
    result = search_resources(args.query, args.category, args.zip)
    print(json.dumps(result.model_dump(), indent=2))


if __name__ == "__main__":
    main()
