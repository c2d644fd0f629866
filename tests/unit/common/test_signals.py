"""Tests for common.signals module."""

import signal
from unittest.mock import patch

from common.signals import setup_signal_handler


def _install() -> tuple:
    handlers = {}
    with patch("common.signals.signal.signal", side_effect=lambda sig, h: handlers.__setitem__(sig, h)):
        stop_event = setup_signal_handler()
    return stop_event, handlers


class TestSetupSignalHandler:
    def test_registers_sigint_and_sigterm(self) -> None:
        _, handlers = _install()
        assert set(handlers) == {signal.SIGINT, signal.SIGTERM}

    def test_first_signal_sets_event(self) -> None:
        stop_event, handlers = _install()
        assert not stop_event.is_set()

        with patch("common.signals.os._exit") as mock_exit:
            handlers[signal.SIGTERM](signal.SIGTERM, None)

        assert stop_event.is_set()
        mock_exit.assert_not_called()

    def test_second_signal_exits_immediately(self) -> None:
        stop_event, handlers = _install()

        with patch("common.signals.os._exit") as mock_exit:
            handlers[signal.SIGINT](signal.SIGINT, None)
            handlers[signal.SIGINT](signal.SIGINT, None)

        mock_exit.assert_called_once_with(1)
