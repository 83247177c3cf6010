"""Inventory aging: pure classifier plus the batch sweep that applies it."""

from stockroom.aging.classifier import (
    alert_kind,
    alert_message,
    classify,
    days_in_inventory,
    needs_attention,
    parse_aging_status,
    should_alert,
)
from stockroom.aging.sweep import run_sweep

__all__ = [
    "alert_kind",
    "alert_message",
    "classify",
    "days_in_inventory",
    "needs_attention",
    "parse_aging_status",
    "should_alert",
    "run_sweep",
]
