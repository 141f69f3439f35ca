"""
Dashboard API routes.
"""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_session, get_query_client
from api.schemas.dashboard import DashboardResponse
from core.domain import AuthSession
from core.interfaces.query import QueryClient
from services.dashboard import DashboardTab, DashboardViewModel

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    session: Annotated[AuthSession, Depends(get_current_session)],
    client: Annotated[QueryClient, Depends(get_query_client)],
    tab: Annotated[DashboardTab, Query(description="Tab to render")] = DashboardTab.SUBSCRIPTIONS,
):
    """
    Get the subscriber dashboard rendered for one tab.

    Both sections are loaded; a failure in one is reported in ``error``
    without blocking the other.
    """
    view = DashboardViewModel(client, session)
    await view.load()
    view.select_tab(tab)
    return DashboardResponse.model_validate(asdict(view.render()))
