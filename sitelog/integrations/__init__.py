"""Clients for the stores and services the report form depends on.

All clients implement ``BaseIntegration``.
"""

from sitelog.integrations.base import BaseIntegration
from sitelog.integrations.exporter import ExportClient
from sitelog.integrations.local_drafts import FileDraftStore, LocalDraftStore, MemoryDraftStore
from sitelog.integrations.reports_api import ReportsAPIClient
