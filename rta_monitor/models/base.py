import enum


class TicketStatus(str, enum.Enum):
    new = "new"
    open = "open"
    pending = "pending"
    hold = "hold"
    solved = "solved"
    closed = "closed"


class ChannelClass(str, enum.Enum):
    messaging = "messaging"
    email = "email"


class SortDirection(str, enum.Enum):
    asc = "asc"
    desc = "desc"
