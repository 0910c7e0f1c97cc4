from dataclasses import dataclass

from pydantic_settings import BaseSettings

# Breach thresholds (minutes)
WAIT_TIME_BREACH = 30
HANDLE_TIME_BREACH = 20

MESSAGING_CHANNELS = frozenset({
    "messaging",
    "native_messaging",
    "chat",
    "facebook",
    "facebook_messenger",
    "instagram_direct",
    "line",
    "whatsapp",
    "twitter",
    "twitter_dm",
    "sms",
    "sunshine_conversations_api",
    "any_channel",
})


@dataclass(frozen=True)
class Thresholds:
    wait_time_breach: int = WAIT_TIME_BREACH
    handle_time_breach: int = HANDLE_TIME_BREACH
    messaging_channels: frozenset[str] = MESSAGING_CHANNELS


class Settings(BaseSettings):
    # Zendesk
    zendesk_subdomain: str = ""
    zendesk_email: str = ""
    zendesk_api_token: str = ""
    zendesk_timeout_seconds: float = 10.0

    # Pagination
    ticket_page_size: int = 100
    max_ticket_pages: int = 50
    group_page_size: int = 100

    # Refresh
    refresh_interval_seconds: int = 60

    # SLA thresholds (minutes)
    wait_time_breach: int = WAIT_TIME_BREACH
    handle_time_breach: int = HANDLE_TIME_BREACH
    messaging_channels: list[str] = sorted(MESSAGING_CHANNELS)

    # CORS
    allowed_origins: list[str] = ["http://localhost:5173"]

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def zendesk_configured(self) -> bool:
        return bool(self.zendesk_subdomain and self.zendesk_email and self.zendesk_api_token)

    @property
    def thresholds(self) -> Thresholds:
        return Thresholds(
            wait_time_breach=self.wait_time_breach,
            handle_time_breach=self.handle_time_breach,
            messaging_channels=frozenset(self.messaging_channels),
        )


settings = Settings()
