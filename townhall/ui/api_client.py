"""HTTP client wrapper for the workspace FastAPI backend."""

from __future__ import annotations

import os
from typing import Any

import httpx
import streamlit as st

from townhall.transcription.models import Segment, WordToken

API_URL = os.getenv("API_URL", "http://localhost:8000")


def check_health() -> bool:
    """Return True if the API server responds to /health."""
    try:
        r = httpx.get(f"{API_URL}/health", timeout=5.0)
        return r.status_code == 200
    except httpx.ConnectError:
        return False


def segments_from_response(data: dict[str, Any]) -> list[Segment]:
    """Rebuild :class:`Segment` objects from a transcription response."""
    return [
        Segment(
            speaker_id=s.get("speaker_id"),
            text=s["text"],
            start=s["start"],
            end=s["end"],
            words=tuple(
                WordToken(
                    speaker_id=w.get("speaker_id"),
                    text=w["text"],
                    start=w["start"],
                    end=w["end"],
                )
                for w in s.get("words", [])
            ),
        )
        for s in data.get("segments", [])
    ]


def transcribe(file_content: bytes, filename: str) -> dict:  # type: ignore[type-arg]
    """Upload a recording to the transcription endpoint."""
    try:
        r = httpx.post(
            f"{API_URL}/api/transcriptions",
            files={"file": (filename, file_content)},
            timeout=600.0,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Transcription failed: {e}")
        return {}


def generate_minutes(transcript: str) -> str | None:
    try:
        r = httpx.post(
            f"{API_URL}/api/minutes/generate", json={"transcript": transcript}, timeout=120.0
        )
        r.raise_for_status()
        return r.json()["minutes"]  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Minutes generation failed: {e}")
        return None


def summarize_minutes(transcript: str) -> str | None:
    try:
        r = httpx.post(
            f"{API_URL}/api/minutes/summarize", json={"transcript": transcript}, timeout=120.0
        )
        r.raise_for_status()
        return r.json()["summary"]  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Summary generation failed: {e}")
        return None


def save_minutes(payload: dict[str, Any]) -> dict:  # type: ignore[type-arg]
    try:
        r = httpx.post(f"{API_URL}/api/minutes", json=payload, timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Save failed: {e}")
        return {}


def search_minutes(term: str = "") -> list[dict]:  # type: ignore[type-arg]
    try:
        params = {"q": term} if term else None
        r = httpx.get(f"{API_URL}/api/minutes", params=params, timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return []


def get_schedule(day: str | None = None) -> list[dict]:  # type: ignore[type-arg]
    try:
        params = {"date": day} if day else None
        r = httpx.get(f"{API_URL}/api/schedule", params=params, timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return []


def add_schedule_item(day: str, title: str, description: str | None) -> dict:  # type: ignore[type-arg]
    try:
        r = httpx.post(
            f"{API_URL}/api/schedule",
            json={"date": day, "title": title, "description": description},
            timeout=10.0,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not add schedule item: {e}")
        return {}


def get_event_days() -> list[str]:
    """ISO dates that have at least one schedule item."""
    try:
        r = httpx.get(f"{API_URL}/api/schedule/days", timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return []


def update_schedule_item(
    item_id: str, day: str, title: str, description: str | None
) -> dict:  # type: ignore[type-arg]
    try:
        r = httpx.put(
            f"{API_URL}/api/schedule/{item_id}",
            json={"date": day, "title": title, "description": description},
            timeout=10.0,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not update schedule item: {e}")
        return {}


def delete_schedule_item(item_id: str) -> bool:
    try:
        r = httpx.delete(f"{API_URL}/api/schedule/{item_id}", timeout=10.0)
        r.raise_for_status()
        return True
    except httpx.HTTPError as e:
        st.error(f"Could not delete schedule item: {e}")
        return False


def get_workflows() -> list[dict]:  # type: ignore[type-arg]
    try:
        r = httpx.get(f"{API_URL}/api/workflows", timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError:
        return []


def save_workflow(
    name: str,
    mermaid_code: str,
    description: str | None,
    workflow_id: str | None = None,
) -> dict:  # type: ignore[type-arg]
    """Create a workflow, or update it when *workflow_id* is given."""
    payload = {"name": name, "mermaid_code": mermaid_code, "description": description}
    try:
        if workflow_id:
            r = httpx.put(f"{API_URL}/api/workflows/{workflow_id}", json=payload, timeout=10.0)
        else:
            r = httpx.post(f"{API_URL}/api/workflows", json=payload, timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not save workflow: {e}")
        return {}


def delete_workflow(workflow_id: str) -> bool:
    try:
        r = httpx.delete(f"{API_URL}/api/workflows/{workflow_id}", timeout=10.0)
        r.raise_for_status()
        return True
    except httpx.HTTPError as e:
        st.error(f"Could not delete workflow: {e}")
        return False


def add_workflow_file(workflow_id: str, name: str, url: str | None = None) -> dict:  # type: ignore[type-arg]
    """Attach a file reference to a workflow; returns the updated workflow."""
    try:
        r = httpx.post(
            f"{API_URL}/api/workflows/{workflow_id}/files",
            json={"name": name, "url": url},
            timeout=10.0,
        )
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not attach file: {e}")
        return {}


def delete_workflow_file(workflow_id: str, file_id: str) -> dict:  # type: ignore[type-arg]
    try:
        r = httpx.delete(f"{API_URL}/api/workflows/{workflow_id}/files/{file_id}", timeout=10.0)
        r.raise_for_status()
        return r.json()  # type: ignore[no-any-return]
    except httpx.HTTPError as e:
        st.error(f"Could not remove file: {e}")
        return {}
