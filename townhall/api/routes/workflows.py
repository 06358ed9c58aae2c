"""Workflow endpoints: Mermaid diagrams and their attached files."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response

from townhall.api.models import WorkflowFileRequest, WorkflowModel, WorkflowRequest
from townhall.errors import NotFoundError, ValidationError
from townhall.storage.repository import get_workflow_repository
from townhall.workflows.models import (
    DEFAULT_MERMAID,
    Workflow,
    attach_file,
    build_workflow,
    remove_file,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(workflow_id: str) -> Workflow:
    workflow = get_workflow_repository().get(workflow_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return workflow


@router.get("/api/workflows", response_model=list[WorkflowModel])
async def list_workflows() -> list[WorkflowModel]:
    return [WorkflowModel.from_workflow(w) for w in get_workflow_repository().list()]


@router.post("/api/workflows", response_model=WorkflowModel, status_code=201)
async def create_workflow(request: WorkflowRequest) -> WorkflowModel:
    """Create a workflow; the Mermaid code defaults to a two-step template."""
    mermaid_code = DEFAULT_MERMAID if request.mermaid_code is None else request.mermaid_code
    try:
        workflow = build_workflow(request.name, mermaid_code, request.description)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    get_workflow_repository().save(workflow)
    logger.info("Added workflow %s", workflow.name)
    return WorkflowModel.from_workflow(workflow)


@router.get("/api/workflows/{workflow_id}", response_model=WorkflowModel)
async def get_workflow(workflow_id: str) -> WorkflowModel:
    return WorkflowModel.from_workflow(_get_or_404(workflow_id))


@router.put("/api/workflows/{workflow_id}", response_model=WorkflowModel)
async def update_workflow(workflow_id: str, request: WorkflowRequest) -> WorkflowModel:
    """Replace name, description and Mermaid code; attached files are kept."""
    existing = _get_or_404(workflow_id)
    mermaid_code = existing.mermaid_code if request.mermaid_code is None else request.mermaid_code
    try:
        workflow = build_workflow(
            request.name,
            mermaid_code,
            request.description,
            files=existing.files,
            workflow_id=workflow_id,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    get_workflow_repository().save(workflow)
    return WorkflowModel.from_workflow(workflow)


@router.delete("/api/workflows/{workflow_id}", status_code=204)
async def delete_workflow(workflow_id: str) -> Response:
    if not get_workflow_repository().delete(workflow_id):
        raise HTTPException(status_code=404, detail="Workflow not found")
    return Response(status_code=204)


@router.post("/api/workflows/{workflow_id}/files", response_model=WorkflowModel, status_code=201)
async def add_workflow_file(workflow_id: str, request: WorkflowFileRequest) -> WorkflowModel:
    try:
        workflow = attach_file(_get_or_404(workflow_id), request.name, request.url)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    get_workflow_repository().save(workflow)
    return WorkflowModel.from_workflow(workflow)


@router.delete("/api/workflows/{workflow_id}/files/{file_id}", response_model=WorkflowModel)
async def delete_workflow_file(workflow_id: str, file_id: str) -> WorkflowModel:
    try:
        workflow = remove_file(_get_or_404(workflow_id), file_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    get_workflow_repository().save(workflow)
    return WorkflowModel.from_workflow(workflow)
