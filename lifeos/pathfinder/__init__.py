"""Pathfinder - find and rank assistance resources near the user

Searches the web for grants, programs and services matching a category
and location, then asks the model to pick the relevant ones, estimate
the effort to apply and pull out deadlines.

Degradation ladder:
    1. Search + ranking: enriched opportunities and a one-line summary
    2. Search only (no OpenAI key, or ranking failed): raw results
    3. Search failed: empty list and an apology
"""

TAVILY_SEARCH_URL = "https://api.tavily.com/search"

# Filters offered by the resource feed
CATEGORIES = ("Housing", "Career", "Financial", "Legal", "Health")

NO_RESULTS_MESSAGE = "Sorry, I couldn't find resources at this time."

__all__ = ["CATEGORIES", "NO_RESULTS_MESSAGE", "TAVILY_SEARCH_URL"]
