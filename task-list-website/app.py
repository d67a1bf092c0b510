import html
from datetime import date

import streamlit as st

from tasklist import actions
from tasklist.config import get_config
from tasklist.logging_setup import setup_logging
from tasklist.models import DEFAULT_PRIORITY, PRIORITIES
from tasklist.session import FLASH_KEY, get_store, is_dark_mode, set_dark_mode
from tasklist.theme import set_theme
from tasklist.views import task_list_view

config = get_config()
setup_logging(log_dir=config.log_dir, console_level=config.log_level)

set_theme(dark_mode=is_dark_mode(st.session_state))

store = get_store(st.session_state)


# ----- Header -----
hc1, hc2, hc3 = st.columns([6, 1.3, 0.7])
with hc1:
    st.markdown('<div class="tl-title">Task List</div>', unsafe_allow_html=True)
    st.markdown('<div class="tl-subtitle">Add, edit and tick off your tasks.</div>', unsafe_allow_html=True)
with hc2:
    dark = st.toggle("Dark", value=is_dark_mode(st.session_state), key="dark-toggle")
    if dark != is_dark_mode(st.session_state):
        set_dark_mode(st.session_state, dark)
        st.rerun()
with hc3:
    if st.button("↻", help="Reload tasks", key="reload"):
        if store.load_all().ok:
            st.toast("Tasks refreshed", icon="✅")

# ----- Failure banner -----
if store.last_error is not None:
    ec1, ec2 = st.columns([8, 1])
    with ec1:
        st.error(f"Task storage error: {store.last_error}")
    with ec2:
        if st.button("✕", key="dismiss-error", help="Dismiss"):
            store.clear_error()
            st.rerun()

# ----- Flash from the previous run -----
flash = st.session_state.pop(FLASH_KEY, None)
if flash:
    st.success(flash)


# ----- Create / edit form -----
editing = store.editing
mode = actions.form_mode(store)


def _picker_default(due_date: str):
    try:
        return date.fromisoformat(due_date) if due_date else None
    except ValueError:
        return None


with st.form("task-form", clear_on_submit=(mode == "create")):
    st.markdown("#### Edit task" if mode == "edit" else "#### New task")
    name = st.text_input("Task name", value=editing.name if editing else "")
    fc1, fc2 = st.columns(2)
    with fc1:
        default_priority = editing.priority if editing and editing.priority in PRIORITIES else DEFAULT_PRIORITY
        priority = st.selectbox("Priority", PRIORITIES, index=PRIORITIES.index(default_priority))
    with fc2:
        # An edited task without a usable date opens with an empty picker.
        default_due = _picker_default(editing.due_date) if editing else date.today()
        due = st.date_input("Due date", value=default_due)
    submitted = st.form_submit_button("💾 Save changes" if mode == "edit" else "➕ Add task")

if submitted:
    if editing is not None and default_due is None and due is None:
        due = editing.due_date
    result = actions.submit_task_form(store, name=name, priority=priority, due_date=due)
    if result.ok:
        st.session_state[FLASH_KEY] = "Saved" if mode == "edit" else "Task added"
        st.rerun()
    elif isinstance(result.error, ValueError):
        st.warning(result.message)
    else:
        st.rerun()

if mode == "edit":
    if st.button("Cancel edit", key="cancel-edit"):
        store.cancel_edit()
        st.rerun()


# ----- Task sections -----
# Streamlit runs one script per session at a time, so a row's remote call has
# finished before the row is drawn again; the store refuses overlapping calls.
def _toggle(tid: str, key: str):
    # Put the checkbox back if the store refused the change.
    if not actions.toggle_task(store, tid).ok:
        st.session_state[key] = not st.session_state[key]


def render_task(t, section: str):
    tid = t.id
    row_cls = "tl-task-done" if t.done else ""
    c1, c2, c3, c4 = st.columns([0.6, 6, 0.8, 0.8])
    with c1:
        key = f"done-{section}-{tid}"
        st.checkbox(
            "Done",
            value=t.done,
            key=key,
            label_visibility="collapsed",
            on_change=_toggle,
            args=(tid, key),
        )
    with c2:
        due_txt = f"Due {html.escape(t.due_date)}" if t.due_date else "No due date"
        st.markdown(
            f'<div class="{row_cls}">'
            f'<div class="tl-task-name">{html.escape(t.name)}'
            f'<span class="tl-priority tl-priority-{html.escape(t.priority)}">{html.escape(t.priority)}</span></div>'
            f'<div class="tl-task-meta">{due_txt}</div>'
            f'</div>',
            unsafe_allow_html=True,
        )
    with c3:
        if st.button("✏️", key=f"edit-{section}-{tid}", help="Edit"):
            actions.start_edit(store, tid)
            st.rerun()
    with c4:
        if st.button("🗑", key=f"del-{section}-{tid}", help="Delete"):
            actions.delete_task(store, tid)
            st.rerun()


if not store.loaded:
    st.info("Tasks could not be loaded. Use ↻ to try again.")
else:
    view = task_list_view(store.tasks)
    if view.total:
        st.progress(view.progress, text=f"{len(view.completed)} of {view.total} done")

    sections = [("todo", "To do", view.incomplete), ("completed", "Completed", view.completed)]
    for key, label, items in sections:
        st.markdown(f'<div class="tl-section">{label}<span>{len(items)}</span></div>', unsafe_allow_html=True)
        if not items:
            st.markdown('<div class="tl-empty">Nothing here.</div>', unsafe_allow_html=True)
        for t in items:
            render_task(t, key)
