"""Follow-up orchestrator state definition."""

from typing import TypedDict


class FollowUpState(TypedDict, total=False):
    """State for the follow-up LangGraph orchestrator."""

    path: str

    # Populated by summarize / lookup / share nodes
    summary: str
    my_email: str
    share_link: str

    # Populated by send_email node
    email_sent_to: str

    # Populated by follow-up nodes
    follow_up_start: str
    follow_up_end: str
    task_id: str
    event_id: str
