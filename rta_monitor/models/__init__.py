from rta_monitor.models.base import ChannelClass, SortDirection, TicketStatus
from rta_monitor.models.group import Group
from rta_monitor.models.ticket import Ticket, TicketVia

__all__ = [
    "ChannelClass",
    "SortDirection",
    "TicketStatus",
    "Group",
    "Ticket",
    "TicketVia",
]
