"""Application bootstrap.

Wires settings, logging, the HTTP client and the export engine together
for one CLI invocation.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx

from .client import RateLimitedTransport, TradervueClient
from .core.clock import IClock, WallClock
from .core.config import Settings, load_settings
from .core.models import DailySummary
from .core.timeutil import parse_file_date, reference_zone
from .export import ExportOptions, ExportOrchestrator, ExportResult
from .observability.logger import get_logger, new_run_id, setup_logging
from .summary import SummaryGenerator

logger = get_logger(__name__)


def bootstrap(
    config_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings and configure logging."""
    settings = load_settings(config_path=config_path, overrides=overrides)
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    return settings


def build_transport(
    settings: Settings,
    http_transport: httpx.BaseTransport | None = None,
) -> RateLimitedTransport:
    api = settings.api
    return RateLimitedTransport(
        api.base_url,
        settings.username,
        settings.password,
        user_agent=settings.user_agent,
        min_interval=api.min_request_interval,
        max_retries=api.max_retries,
        base_backoff=api.base_backoff,
        timeout=api.timeout,
        transport=http_transport,
    )


def run_export(
    settings: Settings,
    options: ExportOptions,
    *,
    clock: IClock | None = None,
    http_transport: httpx.BaseTransport | None = None,
) -> ExportResult:
    """Run one export. Raises ``ExportError`` subclasses on failure."""
    settings.require_credentials()
    run_id = new_run_id()
    logger.info(
        "Starting export",
        run_id=run_id,
        data_dir=settings.data_dir,
        with_executions=options.with_executions,
        force=options.force,
    )

    with build_transport(settings, http_transport) as transport:
        orchestrator = ExportOrchestrator(
            TradervueClient(transport),
            settings.data_path,
            clock=clock or WallClock(),
            tz=reference_zone(settings.export.reference_timezone),
            page_size=settings.api.page_size,
            max_pages=settings.api.max_pages,
            discovery_start=parse_file_date(settings.export.discovery_start),
        )
        return orchestrator.run(options)


def run_summary(
    data_dir: str,
    from_date: date | None = None,
    to_date: date | None = None,
) -> list[DailySummary]:
    return SummaryGenerator(data_dir).generate(from_date, to_date)
