"""Neighborhood Association Workspace -- Streamlit UI.

Multi-page application for creating meeting minutes from recordings,
managing the annual schedule, and editing workflow diagrams.
"""

from __future__ import annotations

from datetime import date

import streamlit as st

from townhall.minutes.session import (
    INCOMPLETE_MESSAGE,
    MINUTES_FAILED_MESSAGE,
    NO_FILE_MESSAGE,
    NO_TRANSCRIPT_MESSAGE,
    SUMMARY_FAILED_MESSAGE,
    TRANSCRIPTION_FAILED_MESSAGE,
    MinutesDraft,
)
from townhall.transcription.segmenter import format_timeline
from townhall.ui.api_client import (
    add_schedule_item,
    add_workflow_file,
    check_health,
    delete_schedule_item,
    delete_workflow,
    delete_workflow_file,
    generate_minutes,
    get_event_days,
    get_schedule,
    get_workflows,
    save_minutes,
    save_workflow,
    search_minutes,
    segments_from_response,
    summarize_minutes,
    transcribe,
    update_schedule_item,
)
from townhall.workflows.models import DEFAULT_MERMAID

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(page_title="町内会ワークスペース", layout="wide")

if "draft" not in st.session_state:
    st.session_state.draft = MinutesDraft()
# Bumped after a save so the uploader starts empty
if "upload_key" not in st.session_state:
    st.session_state.upload_key = 0


def _dispatch(draft: MinutesDraft) -> None:
    """Replace the current draft; the page re-renders from the new state."""
    st.session_state.draft = draft


# ---------------------------------------------------------------------------
# Sidebar -- navigation + API status
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("町内会ワークスペース")
    st.markdown("---")

    page = st.radio(
        "Navigate",
        ["議事録管理", "年間スケジュール", "ワークフロー"],
        label_visibility="collapsed",
    )

    st.markdown("---")

    # API connection indicator
    api_healthy = check_health()
    if api_healthy:
        st.markdown(":green_circle: API connected")
    else:
        st.markdown(":red_circle: API unreachable")

# ---------------------------------------------------------------------------
# Page: Minutes
# ---------------------------------------------------------------------------
if page == "議事録管理":
    st.header("議事録管理")
    draft: MinutesDraft = st.session_state.draft

    uploaded_file = st.file_uploader(
        "1. 音声ファイルを選択",
        type=["mp3", "wav", "m4a", "mp4", "ogg", "flac", "webm"],
        key=f"audio-{st.session_state.upload_key}",
    )
    if uploaded_file is not None and uploaded_file.name != draft.filename:
        _dispatch(draft.select_file(uploaded_file.name))
        draft = st.session_state.draft

    if draft.notice:
        st.success(draft.notice)
    if draft.error:
        st.error(draft.error)

    if st.button("2. 文字起こし開始", disabled=uploaded_file is None):
        if uploaded_file is None:
            _dispatch(draft.with_error(NO_FILE_MESSAGE))
        else:
            with st.spinner("Transcribing..."):
                result = transcribe(uploaded_file.getvalue(), uploaded_file.name)
            if result:
                _dispatch(draft.with_transcript(segments_from_response(result), result["transcript"]))
            else:
                _dispatch(draft.with_error(TRANSCRIPTION_FAILED_MESSAGE))
        st.rerun()

    if draft.transcript:
        st.subheader("文字起こし結果")
        with st.container(height=300):
            for row in format_timeline(draft.segments):
                st.text(row)

        col_a, col_b = st.columns(2)
        if col_a.button("3. AIで議事録を作成"):
            with st.spinner("Generating minutes..."):
                minutes = generate_minutes(draft.transcript)
            _dispatch(draft.with_minutes(minutes) if minutes else draft.with_error(MINUTES_FAILED_MESSAGE))
            st.rerun()
        if col_b.button("AIで要約を作成"):
            with st.spinner("Summarizing..."):
                summary = summarize_minutes(draft.transcript)
            _dispatch(draft.with_summary(summary) if summary else draft.with_error(SUMMARY_FAILED_MESSAGE))
            st.rerun()
    elif uploaded_file is not None:
        st.caption(NO_TRANSCRIPT_MESSAGE)

    if draft.minutes:
        st.subheader("生成された議事録")
        st.markdown(draft.minutes)

    if draft.summary:
        st.subheader("生成された要約")
        st.markdown(draft.summary)

    if draft.transcript and draft.minutes and draft.summary:
        if st.button("議事録を保存"):
            if not draft.can_save:
                _dispatch(draft.with_error(INCOMPLETE_MESSAGE))
            else:
                saved = save_minutes(
                    {
                        "filename": draft.filename,
                        "transcription": draft.transcript,
                        "minutes": draft.minutes,
                        "summary": draft.summary,
                    }
                )
                if saved:
                    _dispatch(draft.saved(saved["title"]))
                    st.session_state.upload_key += 1
            st.rerun()

    st.markdown("---")
    st.subheader("保存済み議事録")
    term = st.text_input("議事録を検索...", label_visibility="collapsed", placeholder="議事録を検索...")
    saved_minutes = search_minutes(term) if api_healthy else []
    if not saved_minutes:
        st.info("該当する議事録が見つかりません。")
    for minute in saved_minutes:
        with st.expander(f"{minute['title']} ({minute['date']})"):
            st.markdown(f"**要約:** {minute['summary']}")
            st.markdown("**議事録:**")
            st.text(minute["minutes"])
            st.markdown("**文字起こし:**")
            st.text(minute["transcription"])

# ---------------------------------------------------------------------------
# Page: Schedule
# ---------------------------------------------------------------------------
elif page == "年間スケジュール":
    st.header("年間スケジュール管理")

    col_cal, col_days = st.columns([2, 1])
    with col_cal:
        selected = st.date_input("日付を選択", value=date.today())
    day = selected.isoformat() if isinstance(selected, date) else date.today().isoformat()
    with col_days:
        st.markdown("**予定のある日**")
        for event_day in get_event_days():
            marker = ":large_blue_circle:" if event_day == day else "-"
            st.markdown(f"{marker} {event_day}")

    st.subheader(f"{day} の予定")
    items = get_schedule(day)
    if not items:
        st.caption("この日の予定はありません。")
    for item in items:
        with st.expander(item["title"]):
            st.markdown(item.get("description") or "")
            with st.form(f"edit-{item['id']}"):
                new_day = st.date_input(
                    "日付", value=date.fromisoformat(item["date"]), key=f"edit-day-{item['id']}"
                )
                new_title = st.text_input(
                    "タイトル", value=item["title"], key=f"edit-title-{item['id']}"
                )
                new_description = st.text_area(
                    "説明",
                    value=item.get("description") or "",
                    key=f"edit-description-{item['id']}",
                )
                if st.form_submit_button("更新"):
                    if update_schedule_item(
                        item["id"],
                        new_day.isoformat() if isinstance(new_day, date) else item["date"],
                        new_title,
                        new_description or None,
                    ):
                        st.rerun()
            if st.button("削除", key=f"delete-{item['id']}"):
                if delete_schedule_item(item["id"]):
                    st.rerun()

    with st.form("add-schedule-item", clear_on_submit=True):
        title = st.text_input("タイトル")
        description = st.text_area("説明")
        if st.form_submit_button("予定を追加"):
            if add_schedule_item(day, title, description or None):
                st.rerun()

    with st.expander("すべての予定"):
        for item in get_schedule():
            st.write(f"- {item['date']} {item['title']}")

# ---------------------------------------------------------------------------
# Page: Workflows
# ---------------------------------------------------------------------------
elif page == "ワークフロー":
    st.header("ワークフロー")

    workflows = get_workflows()
    options: dict[str, dict | None] = {"新規作成": None}  # type: ignore[type-arg]
    for wf in workflows:
        options[wf["name"]] = wf
    selected_label = st.selectbox("ワークフローを選択", options=list(options.keys()))
    current = options[selected_label]

    with st.form("workflow-form"):
        name = st.text_input("ワークフロー名", value=current["name"] if current else "")
        description = st.text_input(
            "説明", value=(current.get("description") or "") if current else ""
        )
        mermaid_code = st.text_area(
            "Mermaidコード",
            value=current["mermaid_code"] if current else DEFAULT_MERMAID,
            height=200,
        )
        if st.form_submit_button("保存"):
            saved = save_workflow(
                name, mermaid_code, description or None, current["id"] if current else None
            )
            if saved:
                st.success(f"ワークフロー「{saved['name']}」を保存しました。")

    if current:
        st.subheader("図")
        st.code(current["mermaid_code"], language="mermaid")

        st.subheader("添付ファイル")
        for f in current["files"]:
            col_a, col_b = st.columns([5, 1])
            col_a.write(f"- {f['name']}")
            if col_b.button("削除", key=f"file-{f['id']}"):
                if delete_workflow_file(current["id"], f["id"]):
                    st.rerun()

        attachment = st.file_uploader("ファイルを添付", key=f"attach-{current['id']}")
        if attachment is not None and st.button("添付する"):
            if add_workflow_file(current["id"], attachment.name):
                st.rerun()

        st.markdown("---")
        if st.button("ワークフローを削除", type="primary"):
            if delete_workflow(current["id"]):
                st.rerun()
