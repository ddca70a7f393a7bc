"""Dreamer profile form."""

import streamlit as st

from dreamscape.ui.api_client import APIError, get_api_client

_STYLES = [
    ("No preference", ""),
    ("Surreal", "surreal"),
    ("Realistic", "realistic"),
    ("Cartoonish", "cartoonish"),
    ("Abstract", "abstract"),
]


def render_settings() -> None:
    client = get_api_client(st.session_state.api_base_url)
    try:
        profile = client.get_profile()
    except APIError as exc:
        st.error(exc.message)
        return

    labels = [label for label, _ in _STYLES]
    values = [value for _, value in _STYLES]
    current = profile.get("visual_style", "")
    style_idx = values.index(current) if current in values else 0

    with st.form("dreamer_profile"):
        self_description = st.text_area(
            "Describe yourself",
            value=profile.get("self_description", ""),
            help="Helps the video reflect who is dreaming.",
        )
        triggers = st.text_area(
            "Triggers and boundaries",
            value=profile.get("triggers_and_boundaries", ""),
            help="Anything that should never appear in your dream videos.",
        )
        selected = st.selectbox(
            "Visual style",
            range(len(labels)),
            index=style_idx,
            format_func=lambda i: labels[i],
        )
        if st.form_submit_button("Save profile", type="primary"):
            try:
                client.save_profile(
                    {
                        "self_description": self_description,
                        "triggers_and_boundaries": triggers,
                        "visual_style": values[selected],
                    }
                )
            except APIError as exc:
                st.error(exc.message)
            else:
                st.success("Profile saved")
