"""Workflow diagrams (Mermaid source) and their attached files."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace

from townhall.errors import NotFoundError, ValidationError

DEFAULT_MERMAID = "graph TD\n    A[ステップ1] --> B[ステップ2];"


@dataclass
class WorkflowFile:
    """A document attached to a workflow (template, form, etc.)."""

    id: str
    name: str
    url: str | None = None  # set once the file is in cloud storage


@dataclass
class Workflow:
    """A named procedure described by a Mermaid diagram."""

    id: str
    name: str
    mermaid_code: str
    description: str | None = None
    files: list[WorkflowFile] = field(default_factory=list)


def build_workflow(
    name: str,
    mermaid_code: str = DEFAULT_MERMAID,
    description: str | None = None,
    files: list[WorkflowFile] | None = None,
    workflow_id: str | None = None,
) -> Workflow:
    """Create (or rebuild, when *workflow_id* is given) a validated workflow.

    Raises:
        ValidationError: If the name or the Mermaid code is blank.
    """
    name = name.strip()
    if not name:
        raise ValidationError("ワークフロー名は必須です。")
    if not mermaid_code.strip():
        raise ValidationError("Mermaidコードは必須です。")
    return Workflow(
        id=workflow_id or uuid.uuid4().hex,
        name=name,
        mermaid_code=mermaid_code,
        description=(description or "").strip() or None,
        files=list(files or []),
    )


def attach_file(workflow: Workflow, name: str, url: str | None = None) -> Workflow:
    if not name.strip():
        raise ValidationError("ファイル名は必須です。")
    new_file = WorkflowFile(id=uuid.uuid4().hex, name=name.strip(), url=url)
    return replace(workflow, files=[*workflow.files, new_file])


def remove_file(workflow: Workflow, file_id: str) -> Workflow:
    remaining = [f for f in workflow.files if f.id != file_id]
    if len(remaining) == len(workflow.files):
        raise NotFoundError(f"File {file_id} not found on workflow {workflow.id}")
    return replace(workflow, files=remaining)
