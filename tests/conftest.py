"""
Shared test configuration and fixtures for the bsvalias client tests.

Provides scripted random sources, DNS-over-HTTPS response builders and mocked
transports used across the resolver test files.
"""

from typing import Any, Dict, Iterable, List, Optional
from unittest.mock import AsyncMock

import pytest


QUERY_NAME = "_bsvalias._tcp.example.com"


class ScriptedRandom:
    """Random source returning a fixed sequence of draws.

    Records every randrange call so tests can assert how much randomness
    was consumed.
    """

    def __init__(self, draws: Iterable[int]) -> None:
        self._draws = list(draws)
        self.calls: List[int] = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        if len(self._draws) == 0:
            raise AssertionError(f"Unexpected random draw in [0, {stop})")
        draw = self._draws.pop(0)
        assert 0 <= draw < stop, f"scripted draw {draw} outside [0, {stop})"
        return draw


def srv_answer(data: str, name: str = QUERY_NAME, record_type: int = 33) -> Dict[str, Any]:
    return {"name": name, "type": record_type, "TTL": 299, "data": data}


def doh_response(
    answers: Optional[List[Dict[str, Any]]] = None,
    status: int = 0,
    ad: bool = True,
    question_name: str = QUERY_NAME,
    question_type: int = 33,
) -> Dict[str, Any]:
    """Build a DNS-over-HTTPS JSON response like the ones Cloudflare sends."""
    response: Dict[str, Any] = {
        "Status": status,
        "TC": False,
        "RD": True,
        "RA": True,
        "AD": ad,
        "CD": False,
        "Question": [{"name": question_name, "type": question_type}],
    }
    if answers is not None:
        response["Answer"] = answers
    return response


def well_known_document(
    capabilities: Optional[Dict[str, Any]] = None, version: str = "1.0"
) -> Dict[str, Any]:
    return {
        "bsvalias": version,
        "capabilities": (
            capabilities
            if capabilities is not None
            else {
                "pki": "https://bsvalias.example.org/{alias}@{domain.tld}/id",
                "paymentDestination": "https://bsvalias.example.org/{alias}@{domain.tld}/payment-destination",
            }
        ),
    }


@pytest.fixture
def mock_transport():
    """Transport whose get/post coroutines are AsyncMocks."""
    transport = AsyncMock()
    transport.get = AsyncMock()
    transport.post = AsyncMock()
    return transport
