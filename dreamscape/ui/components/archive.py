"""
Archive components: the paginated dream grid and the dream detail view.
"""

import json

import streamlit as st

from dreamscape.ui.api_client import APIError, get_api_client
from dreamscape.ui.navigation import ViewController
from dreamscape.ui.utils import decode_data_uri, display_title, format_dream_date, paginate

GRID_COLUMNS = 4


def _render_thumbnail(dream: dict) -> None:
    thumbnail = dream.get("video_thumbnail")
    payload = decode_data_uri(thumbnail)
    if payload is not None:
        st.image(payload, use_container_width=True)
    elif thumbnail and thumbnail.startswith("http"):
        st.image(thumbnail, use_container_width=True)
    else:
        glyphs = "".join(dream.get("emojis", [])[:3]) or "\U0001f319"
        st.markdown(f"### {glyphs}")


def render_archive(views: ViewController) -> None:
    """Grid of dream cards, 16 per page, newest first."""
    client = get_api_client(st.session_state.api_base_url)
    try:
        dreams = client.list_dreams()
    except APIError as exc:
        st.error(exc.message)
        return

    if not dreams:
        st.info("No dreams yet. Record one to get started.")
        return

    page_items, total_pages = paginate(dreams, st.session_state.archive_page)
    st.caption(f"{len(dreams)} dream(s)")

    for row_start in range(0, len(page_items), GRID_COLUMNS):
        columns = st.columns(GRID_COLUMNS)
        for column, dream in zip(columns, page_items[row_start : row_start + GRID_COLUMNS]):
            with column, st.container(border=True):
                _render_thumbnail(dream)
                st.markdown(f"**{display_title(dream)}**")
                st.caption(format_dream_date(dream["created_at"]))
                if st.button("Open", key=f"open_{dream['id']}", use_container_width=True):
                    views.show_detail(dream["id"])
                    st.rerun()

    if total_pages > 1:
        prev_col, label_col, next_col = st.columns([1, 2, 1])
        with prev_col:
            if st.button("Previous", disabled=st.session_state.archive_page <= 1):
                st.session_state.archive_page -= 1
                st.rerun()
        with label_col:
            st.caption(f"Page {st.session_state.archive_page} of {total_pages}")
        with next_col:
            if st.button("Next", disabled=st.session_state.archive_page >= total_pages):
                st.session_state.archive_page += 1
                st.rerun()


@st.dialog("Delete dream?")
def _confirm_delete(views: ViewController, dream: dict) -> None:
    st.write(f"**{display_title(dream)}** will be removed permanently.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Delete", type="primary", use_container_width=True):
            try:
                get_api_client(st.session_state.api_base_url).delete_dream(dream["id"])
            except APIError as exc:
                st.error(exc.message)
                return
            views.dream_deleted(dream["id"])
            st.rerun()
    with col2:
        if st.button("Cancel", use_container_width=True):
            st.rerun()


def render_detail(views: ViewController) -> None:
    """Video, editable title, transcript and structure for one dream."""
    client = get_api_client(st.session_state.api_base_url)
    try:
        dream = client.get_dream(views.selected_dream_id or "")
    except APIError as exc:
        st.error(exc.message)
        if st.button("Back to archive"):
            views.back()
            st.rerun()
        return

    if st.button("← Back to archive"):
        views.back()
        st.rerun()

    st.header(display_title(dream))
    st.caption(format_dream_date(dream["created_at"]) + "  " + " ".join(dream.get("emojis", [])))

    if dream.get("video_url"):
        st.video(dream["video_url"])

    with st.form(f"title_{dream['id']}"):
        new_title = st.text_input("Your title", value=dream.get("user_title") or "")
        if st.form_submit_button("Save title"):
            try:
                client.rename_dream(dream["id"], new_title.strip() or None)
            except APIError as exc:
                st.error(exc.message)
            else:
                st.rerun()

    st.markdown(f"**AI title**: {dream.get('ai_title', '')}")
    st.write(dream.get("ai_description", ""))

    with st.expander("Transcript"):
        st.write(dream.get("transcript_raw", ""))
    with st.expander("Dream structure"):
        st.code(json.dumps(dream.get("transcript_json", {}), indent=2), language="json")

    if st.button("Delete dream", type="secondary"):
        _confirm_delete(views, dream)
