"""
Pathfinder Route - Local resource search

GET /api/pathfinder/search?query=...&category=Housing&zip_code=08096
"""

import logging

from fastapi import APIRouter, Depends, Query

from lifeos.dashboard.backend.dependencies import get_current_user
from lifeos.pathfinder import CATEGORIES
from lifeos.pathfinder.models import SearchResult
from lifeos.pathfinder.search import search_resources


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search", response_model=SearchResult)
def search(
    query: str = Query(..., min_length=1, description="What the user is looking for"),
    category: str = Query(CATEGORIES[0], description="Resource category"),
    zip_code: str | None = Query(None, description="Optional zip code"),
    user: dict = Depends(get_current_user),
):
    """Search and rank resources. Collaborator failures degrade to raw or empty results."""
    return search_resources(query, category, zip_code)
