from collections.abc import Collection

from rta_monitor.config import MESSAGING_CHANNELS
from rta_monitor.models.base import ChannelClass


def classify_channel(
    channel: str | None, messaging_channels: Collection[str] = MESSAGING_CHANNELS
) -> ChannelClass:
    """Messaging if the channel is on the allow-list, email/other for everything else."""
    if channel and channel in messaging_channels:
        return ChannelClass.messaging
    return ChannelClass.email
