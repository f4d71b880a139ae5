"""Shared fake objects for testing.

Modules:
    service - FakeOutlookService answering entity create/update/delete/get
"""

from __future__ import annotations

from tests.fakes.service import FakeOutlookService

__all__ = ["FakeOutlookService"]
