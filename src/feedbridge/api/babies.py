"""Baby and entry endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status

from feedbridge.api.auth import current_user
from feedbridge.api.models import (
    BabiesCreate,
    BabyCreate,
    DehydrationCheckCreate,
    FeedCreate,
    StoolCreate,
    WeightCreate,
    WetDiaperCreate,
    baby_to_dict,
    dashboard_to_dict,
    entry_to_dict,
    summary_to_dict,
)
from feedbridge.domain.entries import EntryKind
from feedbridge.domain.errors import NotFoundError

if TYPE_CHECKING:
    from feedbridge.containers import AppContainer

router = APIRouter(prefix="/babies", tags=["babies"])

ENTRY_PATHS = {
    "feeds": EntryKind.FEED,
    "weights": EntryKind.WEIGHT,
    "stools": EntryKind.STOOL,
    "wet-diapers": EntryKind.WET_DIAPER,
    "dehydration-checks": EntryKind.DEHYDRATION_CHECK,
}


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("")
def list_babies(
    request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Return the user's babies and the currently selected one."""
    container = _container(request)
    babies = container.baby_service.get_babies(user_id)
    selected = container.preferences_service.resolve_selected_baby(user_id, babies)
    return {
        "babies": [summary_to_dict(baby) for baby in babies],
        "selected_baby_id": selected,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_baby(
    payload: BabyCreate, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Add one baby; names must be unique per user."""
    container = _container(request)
    baby = container.baby_service.add_baby(user_id, payload.to_baby())
    container.preferences_service.select_baby(user_id, baby.id)
    return baby_to_dict(baby)


@router.post("/batch", status_code=status.HTTP_201_CREATED)
def create_babies(
    payload: BabiesCreate, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Add several babies in order."""
    container = _container(request)
    created = container.baby_service.add_babies(
        user_id, [baby.to_baby() for baby in payload.babies]
    )
    return {"babies": [baby_to_dict(baby) for baby in created]}


@router.get("/{baby_id}")
def get_baby(
    baby_id: str, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Return a baby with all of its entries."""
    baby = _container(request).baby_service.get_baby(user_id, baby_id)
    if baby is None:
        raise NotFoundError(f"Baby {baby_id} not found")
    return baby_to_dict(baby)


@router.delete("/{baby_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_baby(
    baby_id: str, request: Request, user_id: str = Depends(current_user)
) -> Response:
    """Delete a baby and every one of its entries."""
    container = _container(request)
    container.baby_service.delete_baby(user_id, baby_id)
    if container.preferences_service.get(user_id).selected_baby_id == baby_id:
        container.preferences_service.select_baby(user_id, None)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{baby_id}/dashboard")
def get_dashboard(
    baby_id: str, request: Request, user_id: str = Depends(current_user)
) -> dict[str, object]:
    """Return chart series and alerts for a baby."""
    dashboard = _container(request).dashboard_service.build(user_id, baby_id)
    if dashboard is None:
        raise NotFoundError(f"Baby {baby_id} not found")
    return dashboard_to_dict(dashboard)


@router.post("/{baby_id}/feeds", status_code=status.HTTP_201_CREATED)
def add_feed(
    baby_id: str,
    payload: FeedCreate,
    request: Request,
    user_id: str = Depends(current_user),
) -> dict[str, object]:
    entry = _container(request).baby_service.add_feed_entry(
        user_id, baby_id, payload.to_entry()
    )
    return entry_to_dict(entry)


@router.post("/{baby_id}/weights", status_code=status.HTTP_201_CREATED)
def add_weight(
    baby_id: str,
    payload: WeightCreate,
    request: Request,
    user_id: str = Depends(current_user),
) -> dict[str, object]:
    entry = _container(request).baby_service.add_weight_entry(
        user_id, baby_id, payload.to_entry()
    )
    return entry_to_dict(entry)


@router.post("/{baby_id}/stools", status_code=status.HTTP_201_CREATED)
def add_stool(
    baby_id: str,
    payload: StoolCreate,
    request: Request,
    user_id: str = Depends(current_user),
) -> dict[str, object]:
    entry = _container(request).baby_service.add_stool_entry(
        user_id, baby_id, payload.to_entry()
    )
    return entry_to_dict(entry)


@router.post("/{baby_id}/wet-diapers", status_code=status.HTTP_201_CREATED)
def add_wet_diaper(
    baby_id: str,
    payload: WetDiaperCreate,
    request: Request,
    user_id: str = Depends(current_user),
) -> dict[str, object]:
    entry = _container(request).baby_service.add_wet_diaper_entry(
        user_id, baby_id, payload.to_entry()
    )
    return entry_to_dict(entry)


@router.post("/{baby_id}/dehydration-checks", status_code=status.HTTP_201_CREATED)
def add_dehydration_check(
    baby_id: str,
    payload: DehydrationCheckCreate,
    request: Request,
    user_id: str = Depends(current_user),
) -> dict[str, object]:
    check = _container(request).baby_service.add_dehydration_check(
        user_id, baby_id, payload.to_entry()
    )
    return entry_to_dict(check)


@router.delete(
    "/{baby_id}/{collection}/{entry_id}", status_code=status.HTTP_204_NO_CONTENT
)
def delete_entry(
    baby_id: str,
    collection: str,
    entry_id: str,
    request: Request,
    user_id: str = Depends(current_user),
) -> Response:
    """Delete one entry; ``collection`` is one of the entry path segments."""
    kind = ENTRY_PATHS.get(collection)
    if kind is None:
        raise NotFoundError(f"Unknown entry collection {collection!r}")
    _container(request).baby_service.delete_entry(user_id, baby_id, kind, entry_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
