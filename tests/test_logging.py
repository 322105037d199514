import logging

import structlog

from openfga_demo.core.config import settings
from openfga_demo.core.logging import NOISY_LOGGERS, add_service_context, setup_logging


def test_events_carry_service_and_profile() -> None:
    event = add_service_context(None, "info", {"event": "Permission check"})

    assert event["service"] == settings.SERVICE_NAME
    assert event["profile"] == settings.PROFILE


def test_explicit_service_is_kept() -> None:
    event = add_service_context(None, "info", {"event": "x", "service": "other"})

    assert event["service"] == "other"


def test_setup_logging_quiets_client_libraries() -> None:
    setup_logging()

    assert add_service_context in structlog.get_config()["processors"]
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level >= logging.WARNING
