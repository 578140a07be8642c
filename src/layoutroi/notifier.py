"""One-way reporting of finished calculations to the CRM endpoint.

The engine never calls this module. The adapter hands over a finalized
session; any failure here is logged and reported as ``False`` so the
computed results are unaffected.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Protocol
from urllib.parse import quote, urlencode, urlsplit
from urllib.request import Request, urlopen

from .config import Config, RetryPolicy
from .models import SessionState

LOGGER = logging.getLogger(__name__)

GENERATED_ON_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


class ReportingSink(Protocol):
    def notify(self, state: SessionState) -> bool:
        ...


class NullSink:
    """Sink used when reporting is disabled."""

    def notify(self, state: SessionState) -> bool:
        LOGGER.info("CRM reporting disabled; skipping notification")
        return False


def _plain(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return str(number)


def build_crm_payload(state: SessionState, generated_on: Optional[datetime] = None) -> Dict[str, object]:
    """Snapshot of the customer, analysis setup and traditional crew inputs."""

    customer = state.customer
    options = state.options
    traditional = state.traditional
    stamp = (generated_on or datetime.now()).strftime(GENERATED_ON_FORMAT)
    return {
        "CUSTOMER_INFORMATION": {
            "Company_Name": customer.company_name,
            "Contact_Name": customer.contact_name,
            "Zip_Code": customer.zip_code,
            "Email": customer.email,
            "Phone": customer.phone or "Not provided",
        },
        "Analysis_SETUP": {
            "Analysis_Type": options.analysis_type.value,
            "Layout_Type": options.layout_type.value,
            "Measurement_Unit": options.measurement_unit.value if options.measurement_unit else None,
            "Ownership_Model": options.ownership_model.value,
            "Project_Size": _plain(traditional.project_size),
        },
        "TRADITIONAL_SETUP": {
            "Number_of_Workers": _plain(traditional.worker_count),
            "Hourly_Rate": f"${_plain(traditional.hourly_rate)}",
            "Productivity_Rate": _plain(traditional.productivity),
            "Typical_Rework_Percentage": _plain(traditional.rework_percentage),
        },
        "Generated_On": stamp,
    }


def build_crm_url(base_url: str, payload: Dict[str, object], api_key: Optional[str] = None) -> str:
    """Append the JSON payload as a URL-encoded ``roidata`` query parameter."""

    params = []
    if api_key:
        params.extend([("auth_type", "apikey"), ("zapikey", api_key)])
    params.append(("roidata", json.dumps(payload, separators=(",", ":"))))
    query = urlencode(params, quote_via=quote, safe="")
    separator = "&" if urlsplit(base_url).query else "?"
    return f"{base_url}{separator}{query}"


@dataclass
class _FailureStreak:
    """Consecutive failed sends; reporting is suspended once ``limit`` is reached."""

    limit: int
    count: int = 0

    @property
    def exhausted(self) -> bool:
        return self.limit > 0 and self.count >= self.limit


class CRMNotifier:
    """Sends a calculation snapshot to the CRM function endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        retry: Optional[RetryPolicy] = None,
        *,
        sleeper: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url
        self.api_key = api_key
        self.retry = retry or RetryPolicy()
        self._failures = _FailureStreak(self.retry.circuit_breaker_failures)
        self._sleep = sleeper

    @property
    def suspended(self) -> bool:
        return self._failures.exhausted

    def _get(self, url: str) -> int:
        request = Request(url, method="GET")
        with urlopen(request, timeout=self.retry.timeout_seconds) as response:
            return int(getattr(response, "status", 200))

    def _send(self, url: str) -> int:
        """GET ``url``, retrying ``retry.retries`` more times with doubling backoff."""

        attempt = 0
        while True:
            attempt += 1
            try:
                return self._get(url)
            except (OSError, ValueError) as exc:
                if attempt > self.retry.retries:
                    raise
                delay = max(0.0, self.retry.backoff_factor * (2 ** (attempt - 1)))
                LOGGER.warning(
                    "CRM send failed (%d/%d retries used), retrying in %.2fs: %s",
                    attempt,
                    self.retry.retries,
                    delay,
                    exc,
                )
                if delay:
                    self._sleep(delay)

    def notify(self, state: SessionState) -> bool:
        if not state.customer.is_complete():
            LOGGER.warning("Customer information incomplete; CRM notification skipped")
            return False
        if self.suspended:
            LOGGER.error(
                "CRM reporting suspended after %d consecutive failures; notification skipped",
                self._failures.count,
            )
            return False

        url = build_crm_url(self.base_url, build_crm_payload(state), self.api_key)
        LOGGER.info("Sending ROI snapshot for %s to CRM", state.customer.company_name)
        try:
            status = self._send(url)
        except (OSError, ValueError) as exc:
            self._failures.count += 1
            LOGGER.error("Failed to send CRM notification: %s", exc)
            return False
        self._failures.count = 0
        LOGGER.debug("CRM responded with status %s", status)
        return True


def sink_from_config(config: Config) -> ReportingSink:
    if config.disable_crm or not config.crm_url:
        return NullSink()
    return CRMNotifier(config.crm_url, config.crm_api_key, config.crm_retry)


__all__ = [
    "CRMNotifier",
    "NullSink",
    "ReportingSink",
    "build_crm_payload",
    "build_crm_url",
    "sink_from_config",
]
