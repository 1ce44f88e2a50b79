"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so imports like
``import geispoint`` resolve correctly regardless of the working directory
pytest chooses.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture(autouse=True)
def reset_cache_registry():
    """Restore the built-in cache backend registry before each test."""
    from geispoint.cache import reset_cache_backends

    reset_cache_backends()
    yield


class FakeTransport:
    """Records RPC calls and answers them with canned JSON strings."""

    def __init__(self, responses: Mapping[str, str]) -> None:
        self._responses = dict(responses)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def call(self, operation: str, arguments: Mapping[str, Any]) -> str:
        self.calls.append((operation, dict(arguments)))
        return self._responses[operation]


@pytest.fixture
def fake_transport_factory():
    """Build a :class:`FakeTransport` from an operation -> payload mapping."""
    return FakeTransport
