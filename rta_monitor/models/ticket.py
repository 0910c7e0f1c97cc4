from datetime import datetime

from pydantic import BaseModel


class TicketVia(BaseModel):
    channel: str = ""

    model_config = {"frozen": True, "extra": "ignore"}


class Ticket(BaseModel):
    """A ticket as returned by the search API.

    Only the fields the dashboard reads are kept. ``status`` stays a plain
    string so statuses the dashboard does not handle still parse.
    """

    id: int
    status: str
    assignee_id: int | None = None
    group_id: int | None = None
    created_at: datetime
    updated_at: datetime
    via: TicketVia = TicketVia()

    model_config = {"frozen": True, "extra": "ignore"}

    @property
    def channel(self) -> str:
        return self.via.channel
