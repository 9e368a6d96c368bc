from __future__ import annotations

from dataclasses import replace
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from campshare.domain.models import CleaningStatus, CleaningTask, MaintenanceStatus, MaintenanceTask
from campshare.domain.queries import assignee_name, filter_cleaning_tasks, filter_maintenance_tasks
from campshare.routers.deps import get_context, require_active_user
from campshare.routers.schemas import AssignRequest, CleaningTaskIn, MaintenanceTaskIn, record_out
from campshare.services.app_context import AppContext

_signed_in = [Depends(require_active_user)]
maintenance_router = APIRouter(prefix="/maintenance", tags=["maintenance"], dependencies=_signed_in)
cleaning_router = APIRouter(prefix="/cleaning", tags=["cleaning"], dependencies=_signed_in)


def _task_out(task, context: AppContext) -> dict:
    data = record_out(task)
    if task.assigned_to:
        data["assignee_name"] = assignee_name(context.users, task.assigned_to)
    return data


# -------------------------------------- maintenance --------------------------------------
@maintenance_router.get("")
def list_maintenance(status: Optional[MaintenanceStatus] = None, context: AppContext = Depends(get_context)):
    return [_task_out(t, context) for t in filter_maintenance_tasks(context.maintenance_tasks, status)]


@maintenance_router.post("", status_code=201)
def create_maintenance(payload: MaintenanceTaskIn, context: AppContext = Depends(get_context)):
    created = context.add_maintenance_task(MaintenanceTask(**payload.model_dump()))
    return _task_out(created, context)


@maintenance_router.put("/{task_id}")
def update_maintenance(task_id: str, payload: MaintenanceTaskIn, context: AppContext = Depends(get_context)):
    existing = context.get_maintenance_task(task_id)
    if not existing:
        raise HTTPException(404, "Task not found")
    updated = MaintenanceTask(**payload.model_dump(), id=task_id, created_at=existing.created_at)
    context.update_maintenance_task(updated)
    return _task_out(updated, context)


@maintenance_router.delete("/{task_id}", status_code=204)
def delete_maintenance(task_id: str, context: AppContext = Depends(get_context)):
    context.delete_maintenance_task(task_id)
    return Response(status_code=204)


# -------------------------------------- cleaning --------------------------------------
@cleaning_router.get("")
def list_cleaning(status: Optional[CleaningStatus] = None, context: AppContext = Depends(get_context)):
    return [_task_out(t, context) for t in filter_cleaning_tasks(context.cleaning_tasks, status)]


@cleaning_router.post("", status_code=201)
def create_cleaning(payload: CleaningTaskIn, context: AppContext = Depends(get_context)):
    created = context.add_cleaning_task(CleaningTask(**payload.model_dump()))
    return _task_out(created, context)


@cleaning_router.put("/{task_id}")
def update_cleaning(task_id: str, payload: CleaningTaskIn, context: AppContext = Depends(get_context)):
    if not context.get_cleaning_task(task_id):
        raise HTTPException(404, "Task not found")
    updated = replace(CleaningTask(**payload.model_dump()), id=task_id)
    context.update_cleaning_task(updated)
    return _task_out(updated, context)


@cleaning_router.delete("/{task_id}", status_code=204)
def delete_cleaning(task_id: str, context: AppContext = Depends(get_context)):
    context.delete_cleaning_task(task_id)
    return Response(status_code=204)


@cleaning_router.post("/{task_id}/toggle")
def toggle_cleaning(task_id: str, context: AppContext = Depends(get_context)):
    if not context.get_cleaning_task(task_id):
        raise HTTPException(404, "Task not found")
    context.toggle_clean_status(task_id)
    return _task_out(context.get_cleaning_task(task_id), context)


@cleaning_router.post("/{task_id}/assign")
def assign_cleaning(task_id: str, payload: AssignRequest, context: AppContext = Depends(get_context)):
    if not context.get_cleaning_task(task_id):
        raise HTTPException(404, "Task not found")
    context.assign_cleaning_task(task_id, payload.user_id)
    return _task_out(context.get_cleaning_task(task_id), context)
