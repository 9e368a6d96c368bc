from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from campshare.domain.models import Event
from campshare.domain.queries import category_label, event_color, events_on_day
from campshare.routers.deps import get_context, require_active_user
from campshare.routers.schemas import EventIn, record_out
from campshare.services.app_context import AppContext

router = APIRouter(prefix="/events", tags=["calendar"], dependencies=[Depends(require_active_user)])


def _event_out(event: Event) -> dict:
    data = record_out(event)
    data["display_color"] = event_color(event)
    data["category_label"] = category_label(event.category)
    return data


@router.get("")
def list_events(day: Optional[date] = None, context: AppContext = Depends(get_context)):
    events = context.events if day is None else events_on_day(context.events, day)
    return [_event_out(e) for e in events]


@router.post("", status_code=201)
def create_event(payload: EventIn, context: AppContext = Depends(get_context)):
    created = context.add_event(Event(**payload.model_dump()))
    return _event_out(created)


@router.put("/{event_id}")
def update_event(event_id: str, payload: EventIn, context: AppContext = Depends(get_context)):
    if not context.get_event(event_id):
        raise HTTPException(404, "Event not found")
    updated = replace(Event(**payload.model_dump()), id=event_id)
    context.update_event(updated)
    return _event_out(updated)


@router.delete("/{event_id}", status_code=204)
def delete_event(event_id: str, context: AppContext = Depends(get_context)):
    context.delete_event(event_id)
    return Response(status_code=204)
