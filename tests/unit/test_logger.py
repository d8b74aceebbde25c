"""Test module for conversion logging"""

import pytest

from html2pptx.logger import ConversionLogger, get_logger


def test_records_warnings_in_order():
    logger = ConversionLogger()
    logger.warn_skipped_element("l1", "line endpoints are missing")
    logger.warn_font_missing("t1", "Helvetica", "Arial")
    warnings = logger.get_warnings()
    assert [w.warning_type for w in warnings] == ["skipped_element", "font_missing"]
    assert warnings[1].message == "Font not found: Helvetica (replaced with Arial)"
    assert warnings[1].details == {"font_family": "Helvetica", "replacement": "Arial"}


def test_unsupported_effects_can_be_silenced():
    logger = ConversionLogger(warn_unsupported=False)
    logger.warn_unsupported_effect("logo", "svg_image")
    assert logger.get_warnings() == []


def test_clear_warnings():
    logger = ConversionLogger()
    logger.warn_skipped_element(None, "no geometry")
    logger.clear_warnings()
    assert logger.get_warnings() == []


def test_logger_takes_no_config():
    with pytest.raises(TypeError):
        ConversionLogger(config=object())


def test_default_logger_is_shared():
    assert get_logger() is get_logger()
