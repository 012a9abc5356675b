"""
Roadmap Route - Generate and adopt recovery roadmaps

Endpoints:
- POST /api/roadmap       - Generate a phased plan from intake answers
- POST /api/roadmap/adopt - Append one phase's tasks to the momentum list
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from lifeos.dashboard.backend.dependencies import get_current_user, get_momentum_manager
from lifeos.dashboard.backend.models import AdoptRoadmapRequest, TaskItem
from lifeos.momentum.manager import MomentumManager
from lifeos.roadmap.generator import generate_roadmap
from lifeos.roadmap.models import RoadmapRequest, RoadmapResult


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=RoadmapResult)
def create_roadmap(request: RoadmapRequest, user: dict = Depends(get_current_user)):
    """
    Generate a roadmap for the signed-in user.

    Model failures return the fallback plan with ``fallback=true``; only a
    missing API key is reported as an error.
    """
    result = generate_roadmap(request)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error or "Roadmap generation failed",
        )
    return result


@router.post("/adopt", response_model=list[TaskItem], status_code=status.HTTP_201_CREATED)
async def adopt_roadmap(
    request: AdoptRoadmapRequest,
    user: dict = Depends(get_current_user),
    manager: MomentumManager = Depends(get_momentum_manager),
):
    tasks = manager.add_roadmap_tasks(user["user_id"], request.roadmap, request.phase_index)
    return [TaskItem(**task.to_dict()) for task in tasks]
