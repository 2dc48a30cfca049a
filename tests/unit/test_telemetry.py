#
# tests/unit/test_telemetry.py
#
"""
Tests for the custom structlog processors and the domain emoji keys.
"""

import logging

import structlog

from fwharness.telemetry.logger import LOG_EMOJIS
from fwharness.telemetry.logger.processors import add_emoji_processor, remove_extra_keys_processor


def _render(method_name: str, **event_dict) -> dict:
    event_dict = add_emoji_processor(None, method_name, event_dict)
    return remove_extra_keys_processor(None, method_name, event_dict)


class TestEmojiProcessors:
    def test_emoji_key_selects_domain_emoji_and_is_dropped(self) -> None:
        rendered = _render("info", event="Signed framework", bundle="/out/Values.framework", emoji_key="sign")

        assert rendered == {"event": f"{LOG_EMOJIS['sign']} Signed framework", "bundle": "/out/Values.framework"}

    def test_level_emoji_without_key(self) -> None:
        assert _render("error", event="Compilation failed")["event"] == f"{LOG_EMOJIS[logging.ERROR]} Compilation failed"

    def test_unknown_key_falls_back_to_general(self) -> None:
        assert _render("info", event="Hi", emoji_key="unknown")["event"] == f"{LOG_EMOJIS['general']} Hi"

    def test_keys_used_at_call_sites_are_known(self) -> None:
        for key in ("build", "sign", "validate", "run", "fail", "path", "success"):
            assert key in LOG_EMOJIS

    def test_processors_in_a_logger_chain(self) -> None:
        logger = structlog.wrap_logger(
            structlog.ReturnLogger(),
            wrapper_class=structlog.BoundLogger,
            processors=[add_emoji_processor, remove_extra_keys_processor, structlog.processors.KeyValueRenderer()],
        )

        line = logger.info("Running test executable", emoji_key="run")

        assert line == f"event='{LOG_EMOJIS['run']} Running test executable'"
