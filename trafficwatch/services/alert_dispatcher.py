"""Decide whether a traffic count warrants an alert and send it."""
import html
import logging
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid

from trafficwatch.schemas.window import TimeWindow, TrafficObservation
from trafficwatch.services.notifier import Notifier

logger = logging.getLogger(__name__)

ALERT_MARKER = "No Traffic Alert"
DEGRADED_MARKER = "Traffic Monitoring Degraded"

_PAGE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: Arial, sans-serif; background-color: #f9f9f9; color: #333; text-align: center; padding: 20px; }}
    .alert {{ background-color: {colour}; color: white; padding: 15px; border-radius: 5px; display: inline-block; }}
  </style>
</head>
<body>
  <h1 class="alert">&#128680; {title} &#128680;</h1>
{paragraphs}
</body>
</html>
"""


def _render(title: str, colour: str, paragraphs: list[str]) -> str:
    body = "\n".join(f"  <p>{p}</p>" for p in paragraphs)
    return _PAGE.format(title=html.escape(title), colour=colour, paragraphs=body)


def _new_message(
    subject: str, sender: str, sender_name: str, recipient: str, text: str, page: str, *, fallback_domain: str
) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = formataddr((sender_name, sender)) if sender_name else sender
    msg["To"] = recipient
    msg["Subject"] = subject
    msg["Date"] = formatdate(usegmt=True)
    # an explicit domain keeps make_msgid off socket.getfqdn()
    msg["Message-ID"] = make_msgid(domain=sender.rpartition("@")[2] or fallback_domain or "localhost")
    msg.set_content(text)
    msg.add_alternative(page, subtype="html")
    return msg


def build_alert_message(
    window: TimeWindow,
    sender: str,
    recipient: str,
    *,
    zone_tag: str,
    target_host: str,
    sender_name: str = "Cloudflare Alert",
) -> EmailMessage:
    """Zero-traffic alert; the body carries the exact window bounds used in the query."""
    time_range = f"{window.start_iso} - {window.end_iso}"
    summary = (
        f"No traffic has been detected in the last {window.minutes} minutes "
        f"for host {target_host} in Cloudflare zone {zone_tag}."
    )
    page = _render(
        ALERT_MARKER,
        "#ff4c4c",
        [
            html.escape(summary),
            f"Time Range: {html.escape(time_range)}",
            "Please investigate to ensure normal operation.",
        ],
    )
    text = f"{summary}\nTime Range: {time_range}\nPlease investigate to ensure normal operation.\n"
    return _new_message(
        f"\U0001F6A8 {ALERT_MARKER} - Cloudflare Zone", sender, sender_name, recipient, text, page,
        fallback_domain=target_host,
    )


def build_degraded_message(
    window: TimeWindow,
    error: str,
    sender: str,
    recipient: str,
    *,
    zone_tag: str,
    target_host: str,
    sender_name: str = "Cloudflare Alert",
) -> EmailMessage:
    """Sent instead of silence when the traffic query itself failed."""
    time_range = f"{window.start_iso} - {window.end_iso}"
    summary = f"Traffic for host {target_host} in Cloudflare zone {zone_tag} could not be checked."
    page = _render(
        DEGRADED_MARKER,
        "#ff9f1a",
        [
            html.escape(summary),
            f"Time Range: {html.escape(time_range)}",
            f"Error: {html.escape(error)}",
        ],
    )
    text = f"{summary}\nTime Range: {time_range}\nError: {error}\n"
    return _new_message(
        f"⚠ {DEGRADED_MARKER} - Cloudflare Zone", sender, sender_name, recipient, text, page,
        fallback_domain=target_host,
    )


async def dispatch(
    observation: TrafficObservation,
    window: TimeWindow,
    sender: str,
    recipient: str,
    notifier: Notifier,
    *,
    zone_tag: str,
    target_host: str,
    sender_name: str = "Cloudflare Alert",
) -> bool:
    """
    Send one alert when the window saw no requests. Returns True when an alert was sent.
    NotificationSendError from the notifier propagates to the caller.
    """
    if observation.request_count != 0:
        logger.info("Traffic detected: %d requests in the last %d minutes", observation.request_count, window.minutes)
        return False
    logger.warning("No traffic detected in the last %d minutes, sending alert to %s", window.minutes, recipient)
    message = build_alert_message(
        window, sender, recipient, zone_tag=zone_tag, target_host=target_host, sender_name=sender_name
    )
    await notifier.send(sender, recipient, message)
    logger.info("Alert email sent")
    return True
