from __future__ import annotations

import logging

from gigdraft.config import Settings, get_settings

_LOG_CONFIGURED = False

# Third-party loggers that flood DEBUG/INFO with per-request or per-glyph detail.
_NOISY_LOGGERS = ("pdfminer", "httpx", "openai", "urllib3")


def configure_logging(settings: Settings | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    _LOG_CONFIGURED = True
