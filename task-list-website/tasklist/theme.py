import streamlit as st
import os


ASSETS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'assets')


def _inject_css(file_name: str) -> bool:
    theme_file = os.path.join(ASSETS_DIR, file_name)
    try:
        with open(theme_file, 'r', encoding='utf-8') as f:
            css = f.read()
    except FileNotFoundError:
        st.error(f"Theme file not found at {theme_file}. Please check the file path.")
        return False
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
    return True


def set_theme(
    page_title: str = "Task List",
    page_icon: str = "📝",
    layout: str = "centered",
    dark_mode: bool = False,
):
    """Configure the Streamlit page & inject the task list CSS.

    The dark stylesheet is layered on top of the base one when ``dark_mode``
    is set; it is a display preference only. Safe to call on every rerun:
    set_page_config is ignored after the first call but CSS is re-injected.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
        )
    except Exception:
        # set_page_config can only be called once; ignore if already set.
        pass

    _inject_css('custom_theme.css')
    if dark_mode:
        _inject_css('dark_theme.css')
