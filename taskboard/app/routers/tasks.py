"""Task API router: HTTP in front of the JSON task boundary."""

import json
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from taskboard.app.core.context import RequestContext
from taskboard.app.core.errors import DecodeError
from taskboard.app.deps import get_request_context, get_task_app

api_router = APIRouter(prefix="/api", tags=["tasks"])
health_router = APIRouter(tags=["health"])


def _json(content: str, status_code: int = 200) -> Response:
    return Response(content=content, status_code=status_code, media_type="application/json")


async def _body_text(request: Request) -> str:
    raw = await request.body()
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError("request body is not valid UTF-8", cause=exc) from exc


def _load_object(text: str) -> dict:
    try:
        payload = json.loads(text or "{}")
    except json.JSONDecodeError as exc:
        raise DecodeError(f"invalid request format: {exc}", cause=exc) from exc
    if not isinstance(payload, dict):
        raise DecodeError("invalid request format: expected a JSON object")
    return payload


@api_router.post("/tasks")
async def create_task(
    request: Request,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    body = await _body_text(request)
    return _json(await run_in_threadpool(task_app.create_task, body, ctx), status_code=201)


@api_router.get("/tasks")
async def list_tasks(
    status: Optional[int] = Query(None),
    priority: Optional[int] = Query(None),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    params = {
        "status": status,
        "priority": priority,
        "dateFrom": date_from,
        "dateTo": date_to,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    params = {key: value for key, value in params.items() if value is not None}
    filter_json = json.dumps(params) if params else ""
    return _json(await run_in_threadpool(task_app.get_tasks, filter_json, ctx))


@api_router.get("/tasks/overdue")
async def list_overdue_tasks(
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    return _json(await run_in_threadpool(task_app.get_overdue_tasks, ctx))


@api_router.get("/tasks/by-status/{status}")
async def list_tasks_by_status(
    status: int,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    return _json(await run_in_threadpool(task_app.get_tasks_by_status, status, ctx))


@api_router.get("/tasks/by-priority/{priority}")
async def list_tasks_by_priority(
    priority: int,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    return _json(await run_in_threadpool(task_app.get_tasks_by_priority, priority, ctx))


@api_router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    return _json(await run_in_threadpool(task_app.get_task, task_id, ctx))


@api_router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    request: Request,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    payload = _load_object(await _body_text(request))
    payload["id"] = task_id
    return _json(await run_in_threadpool(task_app.update_task, json.dumps(payload), ctx))


@api_router.delete("/tasks/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    await run_in_threadpool(task_app.delete_task, task_id, ctx)
    return Response(status_code=204)


@api_router.post("/tasks/{task_id}/toggle")
async def toggle_task_status(
    task_id: str,
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    return _json(await run_in_threadpool(task_app.toggle_task_status, task_id, ctx))


@health_router.get("/healthz")
async def healthz(
    task_app=Depends(get_task_app),
    ctx: RequestContext = Depends(get_request_context),
):
    total = await run_in_threadpool(task_app.count_tasks, ctx)
    return {"status": "ok", "backend": task_app.backend, "total": total}
