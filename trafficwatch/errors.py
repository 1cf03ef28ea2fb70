"""Errors raised while running a traffic check."""


class TrafficWatchError(Exception):
    """Base class for check failures."""


class ConfigurationError(TrafficWatchError):
    """A required setting is missing or invalid."""


class TransportError(TrafficWatchError):
    """The analytics query could not be completed or the API reported errors."""


class MalformedResponseError(TrafficWatchError):
    """The analytics response does not have the expected shape."""


class NotificationSendError(TrafficWatchError):
    """The alert message could not be handed to the mail transport."""
