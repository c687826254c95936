"""Preferences, health-sample, consent and account endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from feedbridge.api.auth import current_user
from feedbridge.api.models import HealthSampleIn, PreferencesUpdate, preferences_to_dict

if TYPE_CHECKING:
    from feedbridge.containers import AppContainer

router = APIRouter(tags=["account"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/preferences")
def get_preferences(
    request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Return the user's preferences."""
    return preferences_to_dict(_container(request).preferences_service.get(user_id))


@router.put("/preferences")
def update_preferences(
    payload: PreferencesUpdate, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Update weight unit, timezone and/or the selected baby."""
    service = _container(request).preferences_service
    preferences = service.update(
        user_id, weight_unit=payload.weight_unit, timezone=payload.timezone
    )
    if "selected_baby_id" in payload.model_fields_set:
        preferences = service.select_baby(user_id, payload.selected_baby_id)
    return preferences_to_dict(preferences)


@router.post("/health-samples", status_code=status.HTTP_202_ACCEPTED)
def mirror_health_sample(
    payload: HealthSampleIn, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Mirror a health sample; storage failures are logged, not retried."""
    stored = _container(request).health_sample_service.mirror_sample(
        user_id, payload.to_sample()
    )
    return {"stored": stored}


@router.delete("/health-samples/{sample_id}", status_code=status.HTTP_202_ACCEPTED)
def remove_health_sample(
    sample_id: str, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Remove a mirrored health sample."""
    removed = _container(request).health_sample_service.remove_sample(
        user_id, sample_id
    )
    return {"removed": removed}


@router.post("/consent", status_code=status.HTTP_201_CREATED)
async def store_consent(
    request: Request, user_id: str = Depends(current_user)
) -> dict[str, str]:
    """Store a signed consent PDF sent as the raw request body."""
    content = await request.body()
    path = _container(request).consent_service.store_consent(user_id, content)
    return {"path": path}


@router.delete("/account", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(request: Request, user_id: str = Depends(current_user)) -> Response:
    """Delete every baby, sample and preference of the user."""
    _container(request).account_service.delete_account(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
