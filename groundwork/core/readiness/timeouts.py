"""Centralized timing defaults for readiness checks.

All values are in seconds. Config values in groundwork.toml override these.
"""


class ReadinessTimeouts:
    """Centralized timing defaults for availability checks.

    Groups:
        AVAILABILITY_*: How long to keep probing the database
        RETRY_*: Wait between failed probes
    """

    AVAILABILITY_TIMEOUT: float = 60.0
    """Default time to keep probing before reporting the database unavailable.

    Long enough to cover a database container starting alongside the
    service. Deployments with slow storage should raise it in config.
    """

    RETRY_INTERVAL: float = 1.0
    """Fixed wait between failed probes.

    There is no backoff: every wait has the same length, capped by the time
    remaining before the deadline. A failing check therefore takes between
    the timeout and the timeout plus one interval.
    """
