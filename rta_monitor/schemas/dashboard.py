import enum
from datetime import datetime

from pydantic import BaseModel, Field

from rta_monitor.models.base import SortDirection


class LongestRecord(BaseModel):
    time: int = 0
    ticket_id: int | None = None
    # Index of the owning ticket in fetch order; breaks ties when projecting
    position: int | None = Field(default=None, exclude=True, repr=False)

    model_config = {"frozen": True}


class GroupMetric(BaseModel):
    id: int
    name: str
    longest_email_wait: int = 0
    longest_msg_wait: int = 0
    longest_email_aht: int = 0
    longest_msg_aht: int = 0
    new_email: int = 0
    new_msg: int = 0
    open_email: int = 0
    open_msg: int = 0
    pending_tickets: int = 0
    breached_wait: int = 0
    breached_aht: int = 0
    total_breached: int = 0
    longest_wait: LongestRecord = LongestRecord()
    longest_handle: LongestRecord = LongestRecord()

    model_config = {"frozen": True}


class AgentStatus(BaseModel):
    online: int = 0
    working: int = 0

    model_config = {"frozen": True}


class DashboardMetrics(BaseModel):
    longest_wait: LongestRecord = LongestRecord()
    longest_handle: LongestRecord = LongestRecord()
    total_new: int = 0
    total_open: int = 0
    breached_wait_count: int = 0
    breached_handle_count: int = 0
    groups: list[GroupMetric] = []
    is_capped: bool = False
    agents: AgentStatus = AgentStatus()
    generated_at: datetime | None = None

    model_config = {"frozen": True}


class GroupOption(BaseModel):
    id: int
    name: str


class SortColumn(str, enum.Enum):
    name = "name"
    longest_email_wait = "longest_email_wait"
    longest_msg_wait = "longest_msg_wait"
    longest_email_aht = "longest_email_aht"
    longest_msg_aht = "longest_msg_aht"
    new_email = "new_email"
    new_msg = "new_msg"
    open_email = "open_email"
    open_msg = "open_msg"
    pending_tickets = "pending_tickets"
    total_breached = "total_breached"


class SortConfig(BaseModel):
    column: SortColumn
    direction: SortDirection = SortDirection.desc
