"""One scheduled traffic check: evaluate the window, alert on zero traffic."""
import logging
from datetime import datetime, timezone
from typing import Optional

from trafficwatch.config import Settings
from trafficwatch.errors import ConfigurationError, MalformedResponseError, NotificationSendError, TransportError
from trafficwatch.schemas.check import CheckResult, CheckStatus
from trafficwatch.services.alert_dispatcher import build_degraded_message, dispatch
from trafficwatch.services.analytics_client import AnalyticsClient
from trafficwatch.services.notifier import Notifier, SmtpNotifier
from trafficwatch.services.window_evaluator import TrafficSource, compute_window, evaluate

logger = logging.getLogger(__name__)


def client_from_settings(settings: Settings) -> AnalyticsClient:
    return AnalyticsClient(
        settings.cloudflare_api_token,
        settings.zone_tag,
        url=settings.graphql_url,
        limit=settings.group_limit,
        timeout=settings.request_timeout,
    )


def notifier_from_settings(settings: Settings) -> SmtpNotifier:
    return SmtpNotifier(
        settings.smtp_host,
        settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        starttls=settings.smtp_starttls,
    )


async def _report_degraded(settings: Settings, notifier: Notifier, now: datetime, error: str) -> bool:
    message = build_degraded_message(
        compute_window(now, settings.lookback),
        error,
        settings.sender_email,
        settings.recipient_email,
        zone_tag=settings.zone_tag,
        target_host=settings.target_host,
        sender_name=settings.sender_name,
    )
    try:
        await notifier.send(settings.sender_email, settings.recipient_email, message)
    except Exception:
        logger.exception("Failed to send degraded-monitoring email")
        return False
    return True


async def run_check(
    settings: Settings,
    *,
    client: Optional[TrafficSource] = None,
    notifier: Optional[Notifier] = None,
    now: Optional[datetime] = None,
) -> CheckResult:
    """
    Run one check and report what happened. Never raises: configuration,
    query and send errors are logged and reflected in the result.
    """
    try:
        settings.validate_for_check()
    except ConfigurationError as e:
        logger.error("Check aborted: %s", e)
        return CheckResult(status=CheckStatus.config_error, error=str(e))

    now = now or datetime.now(timezone.utc)
    client = client or client_from_settings(settings)
    notifier = notifier or notifier_from_settings(settings)

    try:
        window, observation = await evaluate(now, settings.lookback, settings.target_host, client)
    except (TransportError, MalformedResponseError) as e:
        # An unchecked window is not reported as zero traffic
        logger.error("Error fetching data from Cloudflare GraphQL API: %s", e)
        error = str(e)
    except Exception as e:
        logger.exception("Traffic query failed unexpectedly")
        error = f"{type(e).__name__}: {e}"
    else:
        error = None
    if error is not None:
        sent = False
        if settings.alert_on_query_failure:
            sent = await _report_degraded(settings, notifier, now, error)
        return CheckResult(status=CheckStatus.query_failed, alert_sent=sent, error=error)

    try:
        sent = await dispatch(
            observation,
            window,
            settings.sender_email,
            settings.recipient_email,
            notifier,
            zone_tag=settings.zone_tag,
            target_host=settings.target_host,
            sender_name=settings.sender_name,
        )
    except NotificationSendError as e:
        logger.error("Error sending email: %s", e)
        error = str(e)
    except Exception as e:
        logger.exception("Alert dispatch failed unexpectedly")
        error = f"{type(e).__name__}: {e}"
    if error is not None:
        return CheckResult(
            status=CheckStatus.alert_failed,
            window=window,
            request_count=observation.request_count,
            error=error,
        )
    return CheckResult(
        status=CheckStatus.alerted if sent else CheckStatus.quiet,
        window=window,
        request_count=observation.request_count,
        alert_sent=sent,
    )
