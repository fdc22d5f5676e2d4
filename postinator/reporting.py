"""Client for the time-tracking reporting API and the stats pipeline built on it."""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

import requests

from .aggregator import StatsAggregator, parse_caption_date_range
from .constants import REPORTING_API_URL, REPORTING_REPORTS_URL, REPORTING_TIMEOUT
from .errors import AggregationEmpty, ReportingError
from .models import ProjectMapping, RawUsageRecord, StatItem

logger = logging.getLogger(__name__)


class ReportingClient:
    """Fetch project names and per-project tracked time for a workspace.

    Failures surface as ReportingError; retrying is left to the caller.
    """

    def __init__(
        self,
        api_token: str,
        workspace_id: int,
        session: Optional[requests.Session] = None,
        timeout: float = REPORTING_TIMEOUT,
    ) -> None:
        self.api_token = api_token
        self.workspace_id = workspace_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (api_token, "api_token")
        self.project_names: Dict[int, str] = {}

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            raise ReportingError(f"{method} {url} failed: {exc}", stage="reporting") from exc
        except ValueError as exc:
            raise ReportingError(f"{method} {url} returned invalid JSON: {exc}", stage="reporting") from exc

    def refresh_projects(self) -> Dict[int, str]:
        """Refresh and return the project id to name table."""
        url = f"{REPORTING_API_URL}/workspaces/{self.workspace_id}/projects"
        payload = self._request("GET", url)
        if not isinstance(payload, list):
            raise ReportingError("projects response is not a list", stage="reporting")

        for project in payload:
            try:
                self.project_names[int(project["id"])] = str(project["name"])
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed project entry %r", project)
        logger.debug("Project table holds %d entries", len(self.project_names))
        return dict(self.project_names)

    def fetch_summary(self, start: date, end: date) -> List[RawUsageRecord]:
        """Tracked seconds per user and project between ``start`` and ``end``."""
        url = f"{REPORTING_REPORTS_URL}/workspace/{self.workspace_id}/projects/summary"
        body = {"start_date": start.strftime("%Y-%m-%d"), "end_date": end.strftime("%Y-%m-%d")}
        payload = self._request("POST", url, json=body)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ReportingError("summary response is not a list", stage="reporting")

        records: List[RawUsageRecord] = []
        for row in payload:
            try:
                records.append(
                    RawUsageRecord(
                        owner_id=int(row.get("user_id") or 0),
                        project_id=int(row.get("project_id") or 0),
                        tracked_seconds=max(0, int(row.get("tracked_seconds") or 0)),
                    )
                )
            except (AttributeError, TypeError, ValueError):
                logger.warning("Skipping malformed summary row %r", row)
        return records


class StatsService:
    """Caption in, ranked StatItems out: date range, fetch, aggregate."""

    def __init__(
        self,
        client: ReportingClient,
        mappings: Sequence[ProjectMapping],
        other: ProjectMapping,
    ) -> None:
        self.client = client
        self.aggregator = StatsAggregator(mappings, other)

    def collect(self, caption: str, today: Optional[date] = None) -> List[StatItem]:
        start, end = parse_caption_date_range(caption, today)
        logger.info("Collecting stats for %s..%s", start, end)

        project_names = self.client.refresh_projects()
        records = self.client.fetch_summary(start, end)
        items = self.aggregator.aggregate(records, project_names)
        if not items:
            raise AggregationEmpty(f"no tracked time between {start} and {end}", stage="aggregate")
        for item in items:
            logger.debug("  %s: %s", item.label, item.duration_text)
        return items
