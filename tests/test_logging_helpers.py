import logging

import click

from lfm.utils.logging_helpers import format_tier_summary, log_progress


def test_format_tier_summary_orders_tiers():
    summary = click.unstyle(format_tier_summary({"fair": 1, "excellent": 2, "poor": 0}))
    assert summary == "2 excellent, 1 fair"


def test_format_tier_summary_empty():
    assert format_tier_summary({}) == "none"


def test_log_progress_formats_counts(caplog):
    with caplog.at_level(logging.INFO, logger="lfm.utils.logging_helpers"):
        log_progress(processed=5, total=10, new=3, elapsed_seconds=2.0, item_name="lost items")
    message = click.unstyle(caplog.records[-1].getMessage())
    assert "5/10 lost items (50%)" in message
    assert "3 new" in message
    assert "2.5 lost items/s" in message
