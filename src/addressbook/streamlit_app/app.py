import asyncio
import logging

import streamlit as st

from ..book.models import AddressBookEntry
from ..config import get_settings, load_env_file
from ..lookup.factory import create_lookup_service
from ..workflow.capture import (
    FIRST_NAME,
    HOUSE_NUMBER,
    LAST_NAME,
    POST_CODE,
    SELECTED_ADDRESS,
    AddressCaptureWorkflow,
)
from ..workflow.state import WorkflowSnapshot

SESSION_WORKFLOW_KEY = "addressbook_workflow"
CANDIDATE_WIDGET_KEY = "addressbook_candidate_choice"
WIDGET_KEY_PREFIX = "addressbook_field_"

logger = logging.getLogger(__name__)


def widget_key(field_name: str) -> str:
    return f"{WIDGET_KEY_PREFIX}{field_name}"


def format_entry(entry: AddressBookEntry) -> str:
    return f"**{entry.person.full_name}**: {entry.address.label()}"


def get_workflow() -> AddressCaptureWorkflow:
    """Return this session's workflow, creating it on first use."""
    workflow = st.session_state.get(SESSION_WORKFLOW_KEY)
    if workflow is None:
        settings = get_settings()
        workflow = AddressCaptureWorkflow(create_lookup_service(settings))
        st.session_state[SESSION_WORKFLOW_KEY] = workflow
        logger.info("Started address capture session using %s lookup", settings.lookup_provider)
    return workflow


def push_widgets(workflow: AddressCaptureWorkflow, *names: str) -> None:
    for name in names:
        workflow.set_field(name, st.session_state.get(widget_key(name), ""))


def pull_widgets(workflow: AddressCaptureWorkflow) -> None:
    """Mirror workflow fields back into widget state; only safe inside callbacks."""
    for name, value in workflow.snapshot().fields.items():
        if name != SELECTED_ADDRESS:
            st.session_state[widget_key(name)] = value
    st.session_state.pop(CANDIDATE_WIDGET_KEY, None)


def on_candidate_change() -> None:
    workflow = get_workflow()
    candidate_id = st.session_state.get(CANDIDATE_WIDGET_KEY)
    if candidate_id:
        workflow.select_candidate(candidate_id)


def on_person_submit() -> None:
    workflow = get_workflow()
    push_widgets(workflow, FIRST_NAME, LAST_NAME)
    if workflow.submit_person() is not None:
        pull_widgets(workflow)


def on_clear_all() -> None:
    workflow = get_workflow()
    workflow.clear_all()
    pull_widgets(workflow)


def configure_page() -> None:
    st.set_page_config(page_title="Address book", page_icon="🏠", layout="centered")


def render_intro() -> None:
    st.title("Create your own address book!")
    st.caption("Enter an address by postcode add personal info and done! 👏")


def render_search_form(workflow: AddressCaptureWorkflow) -> None:
    with st.form("search_form"):
        st.markdown("**🏠 Find an address**")
        st.text_input("Post Code", key=widget_key(POST_CODE), placeholder="Post Code")
        st.text_input("House number", key=widget_key(HOUSE_NUMBER), placeholder="House number")
        submitted = st.form_submit_button("Find", disabled=workflow.snapshot().loading)

    if submitted:
        push_widgets(workflow, POST_CODE, HOUSE_NUMBER)
        st.session_state.pop(CANDIDATE_WIDGET_KEY, None)
        with st.spinner("Searching..."):
            asyncio.run(workflow.submit_search())


def render_candidates(snapshot: WorkflowSnapshot) -> None:
    if not snapshot.candidates:
        return

    labels = {candidate.id: candidate.label() for candidate in snapshot.candidates}
    st.radio(
        "Select an address",
        options=list(labels),
        index=None,
        format_func=lambda cid: labels.get(cid, cid),
        key=CANDIDATE_WIDGET_KEY,
        on_change=on_candidate_change,
    )


def render_person_form(snapshot: WorkflowSnapshot) -> None:
    if not snapshot.selected_id:
        return

    with st.form("person_form"):
        st.markdown("**✏️ Add personal info to address**")
        st.text_input("First name", key=widget_key(FIRST_NAME), placeholder="First name")
        st.text_input("Last name", key=widget_key(LAST_NAME), placeholder="Last name")
        st.form_submit_button("Add to addressbook", on_click=on_person_submit)


def render_error(snapshot: WorkflowSnapshot) -> None:
    if snapshot.error_message:
        st.error(snapshot.error_message)


def render_address_book(workflow: AddressCaptureWorkflow) -> None:
    st.divider()
    st.subheader("📓 Address book")
    entries = workflow.address_book.list_all()
    if not entries:
        st.caption("No addresses added yet.")
        return
    for entry in entries:
        st.markdown(format_entry(entry))


def main() -> None:
    load_env_file()
    logging.basicConfig(level=get_settings().log_level)
    configure_page()
    workflow = get_workflow()
    render_intro()
    render_search_form(workflow)
    snapshot = workflow.snapshot()
    render_candidates(snapshot)
    render_person_form(snapshot)
    render_error(snapshot)
    st.button("Clear all fields", type="secondary", on_click=on_clear_all)
    render_address_book(workflow)


if __name__ == "__main__":
    main()
