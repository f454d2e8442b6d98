"""
Poll endpoints.

Read-only access to polls, fundings and platform stats, plus the data
source switch between direct contract reads and the subgraph.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from pollpulse.context import AppContext, get_app_context
from pollpulse.services.data_source import DataSource
from pollpulse.utils.logger import logger

router = APIRouter(tags=["polls"])


class DataSourceUpdate(BaseModel):
    data_source: str


@router.get("/polls")
async def list_polls(
    first: int = Query(20, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    context: AppContext = Depends(get_app_context),
) -> List[Dict[str, Any]]:
    """
    List polls from the active data source.

    Each poll carries a `reward_display` string such as "100 PULSE".
    """
    service = context.poll_service
    polls = await service.list_polls(first=first, skip=skip)
    return [service.poll_display(poll) for poll in polls]


@router.get("/polls/{poll_id}")
async def get_poll(poll_id: str, context: AppContext = Depends(get_app_context)) -> Dict[str, Any]:
    """
    Get a single poll by its on-chain poll id.

    Raises:
        404: If the active data source has no such poll
    """
    service = context.poll_service
    poll = await service.get_poll(poll_id)
    return service.poll_display(poll)


@router.get("/polls/{poll_id}/fundings")
async def get_poll_fundings(poll_id: str, context: AppContext = Depends(get_app_context)) -> List[Dict[str, Any]]:
    service = context.poll_service
    fundings = await service.get_poll_fundings(poll_id)
    return [service.funding_display(funding) for funding in fundings]


@router.get("/stats")
async def get_stats(context: AppContext = Depends(get_app_context)) -> Dict[str, Any]:
    stats = await context.poll_service.get_stats()
    return stats.model_dump()


# -------------------------
# Data source switch
# -------------------------

@router.get("/data-source")
async def get_data_source(context: AppContext = Depends(get_app_context)) -> Dict[str, Any]:
    return context.gateway.to_dict()


@router.put("/data-source")
async def set_data_source(
    update: DataSourceUpdate,
    context: AppContext = Depends(get_app_context),
) -> Dict[str, Any]:
    """
    Switch the data source to "contract" or "subgraph".

    While the subgraph is disabled the request succeeds but the data
    source stays on "contract".

    Raises:
        400: If the data source name is unknown
    """
    try:
        source = DataSource.parse(update.data_source)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    context.gateway.set(source)
    logger.info(f"[PollsRouter] Data source requested: {source.value}, active: {context.gateway.data_source.value}")
    return context.gateway.to_dict()


@router.post("/data-source/toggle")
async def toggle_data_source(context: AppContext = Depends(get_app_context)) -> Dict[str, Any]:
    context.gateway.toggle()
    return context.gateway.to_dict()
