"""Traffic watch configuration from environment."""
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

from trafficwatch.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Cloudflare GraphQL analytics
    cloudflare_api_token: str = ""
    zone_tag: str = ""
    target_host: str = ""
    graphql_url: str = "https://api.cloudflare.com/client/v4/graphql"
    group_limit: int = 10000
    request_timeout: float = 10.0

    # Check
    lookback_minutes: int = 15
    check_interval_seconds: int = 900  # 0 disables the in-process loop
    alert_on_query_failure: bool = False

    # Alert email
    sender_email: str = ""
    sender_name: str = "Cloudflare Alert"
    recipient_email: str = ""
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_starttls: bool = False

    # Server
    trigger_token: str = ""
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @property
    def lookback(self) -> timedelta:
        return timedelta(minutes=self.lookback_minutes)

    def validate_for_check(self) -> None:
        """Raise ConfigurationError when a setting a check needs is absent."""
        if not self.zone_tag:
            raise ConfigurationError("ZONE_TAG is not set")
        if not self.cloudflare_api_token:
            raise ConfigurationError("CLOUDFLARE_API_TOKEN is not set")
        if not self.target_host:
            raise ConfigurationError("TARGET_HOST is not set")
        if not self.sender_email or not self.recipient_email:
            raise ConfigurationError("SENDER_EMAIL and RECIPIENT_EMAIL must both be set")
        if self.lookback_minutes <= 0:
            raise ConfigurationError("LOOKBACK_MINUTES must be positive")


settings = Settings()
