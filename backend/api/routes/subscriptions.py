"""
Subscription list API routes.

Cancelling is two requests: ``POST /{id}/cancel`` returns the
confirmation prompt, ``POST /{id}/cancel/confirm`` performs the write.
Ids outside the caller's active subscriptions raise
``SubscriptionNotCancellable``, which the app maps to 404.
"""

import logging
from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_current_session, get_query_client
from api.schemas.subscription import CancelPromptResponse, SubscriptionListResponse
from core.domain import AuthSession
from core.interfaces.query import QueryClient
from services.subscription_list import SubscriptionListViewModel

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


async def _loaded_view(client: QueryClient, session: AuthSession) -> SubscriptionListViewModel:
    if session.profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    view = SubscriptionListViewModel(client, session)
    await view.load()
    return view


@router.get("", response_model=SubscriptionListResponse)
async def list_subscriptions(
    session: Annotated[AuthSession, Depends(get_current_session)],
    client: Annotated[QueryClient, Depends(get_query_client)],
):
    """
    Get the subscriber's subscriptions, split into active and inactive.
    """
    view = await _loaded_view(client, session)
    return SubscriptionListResponse.model_validate(asdict(view.render()))


@router.post("/{subscription_id}/cancel", response_model=CancelPromptResponse)
async def request_cancel(
    subscription_id: str,
    session: Annotated[AuthSession, Depends(get_current_session)],
    client: Annotated[QueryClient, Depends(get_query_client)],
):
    """
    Ask to cancel an active subscription.

    Nothing is written; the response carries the question the user must
    confirm.
    """
    view = await _loaded_view(client, session)
    prompt = view.request_cancel(subscription_id)
    return CancelPromptResponse(subscription_id=prompt.subscription_id, message=prompt.message)


@router.post("/{subscription_id}/cancel/confirm", response_model=SubscriptionListResponse)
async def confirm_cancel(
    subscription_id: str,
    session: Annotated[AuthSession, Depends(get_current_session)],
    client: Annotated[QueryClient, Depends(get_query_client)],
):
    """
    Confirm cancelling an active subscription and return the refreshed list.
    """
    view = await _loaded_view(client, session)
    view.request_cancel(subscription_id)

    if not await view.confirm_cancel():
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=view.cancel_error,
        )

    logger.info(
        "Subscription %s cancelled by %s",
        subscription_id,
        session.user_id,
        extra={"user_id": session.user_id},
    )
    return SubscriptionListResponse.model_validate(asdict(view.render()))
