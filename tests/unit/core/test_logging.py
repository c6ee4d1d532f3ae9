"""Unit tests for correlation-aware logging helpers."""

from __future__ import annotations

import uuid

import pytest
from structlog.testing import capture_logs

from modules.core.logging import (
    bind_correlation_id,
    clear_correlation_id,
    correlation_id_var,
    log_with_correlation,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset_correlation():
    yield
    clear_correlation_id()


@pytest.mark.parametrize(
    "level,expected",
    [
        ("DEBUG", "debug"),
        ("INFO", "info"),
        ("WARN", "warning"),
        ("warning", "warning"),
        ("ERROR", "error"),
    ],
)
def test_levels(level, expected):
    with capture_logs() as logs:
        log_with_correlation(level, "cid-1", "order.pay", "OrderCommandService", order_id="o-1")

    assert logs == [
        {
            "event": "order.pay",
            "log_level": expected,
            "correlation_id": "cid-1",
            "context": "OrderCommandService",
            "order_id": "o-1",
        }
    ]


def test_unknown_level_raises():
    with pytest.raises(ValueError, match="Unknown log level"):
        log_with_correlation("TRACE", None, "x", "ctx")


def test_missing_correlation_id_falls_back_to_bound_one():
    bind_correlation_id("bound-cid")

    with capture_logs() as logs:
        log_with_correlation("INFO", None, "cart.created", "CartService")

    assert logs[0]["correlation_id"] == "bound-cid"


def test_missing_correlation_id_without_binding_is_none():
    with capture_logs() as logs:
        log_with_correlation("INFO", "", "cart.created", "CartService")

    assert logs[0]["correlation_id"] is None


def test_bind_generates_uuid_when_missing():
    cid = bind_correlation_id()

    assert uuid.UUID(cid).version == 4
    assert correlation_id_var.get() == cid


def test_clear_correlation_id():
    bind_correlation_id("cid-x")
    clear_correlation_id()

    assert correlation_id_var.get() == ""
