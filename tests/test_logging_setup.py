import json
import sys

import pytest
from loguru import logger

from airnope.utils.logging_setup import setup_logging


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.configure(extra={})
    logger.add(sys.stderr)


def test_json_records_carry_service_name(capsys, restore_logger):
    setup_logging(level="INFO", format="json", service_name="airnope-test")
    capsys.readouterr()

    logger.info("hello")

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    record = json.loads(lines[-1])["record"]
    assert record["message"] == "hello"
    assert record["extra"]["service"] == "airnope-test"


def test_text_format_prints_service_name(capsys, restore_logger):
    setup_logging(level="INFO", format="text", service_name="airnope-text")
    capsys.readouterr()

    logger.info("hello")

    assert "airnope-text" in capsys.readouterr().out
