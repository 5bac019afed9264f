"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

import logging
import sys
from typing import Optional, TextIO

import colorlog


BUILD_TOOL_LOGGER_NAME = "versionupdate.buildtool"


class CustomColoredFormatter(colorlog.ColoredFormatter):
    def __init__(self, fmt: str, no_color: bool, color: str = "white"):
        super().__init__(
            fmt, no_color=no_color, log_colors=self._get_log_level_colors(color)
        )
        self.fmt = fmt
        self.color = color

    @staticmethod
    def _get_log_level_colors(color: str) -> dict:
        return {
            "DEBUG": color,
            "INFO": color,
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red",
        }


def _get_logger_format(no_log_color: bool, disable_timestamps: bool):
    timestamp = "" if disable_timestamps else "%(asctime)s "
    return CustomColoredFormatter(
        f"%(log_color)s{timestamp}%(levelname)-8s %(message)s",
        no_log_color,
    )


def initialize_root_logger(
    debug: bool, no_log_color: bool, disable_timestamps: bool
) -> None:
    """
    Diagnostics go to stderr, stdout is reserved for the build tool output.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_get_logger_format(no_log_color, disable_timestamps))
    logger.handlers.clear()
    logger.addHandler(console_handler)


class ConsoleLogger:
    """
    Class wrapping a logger that provides support for the "write" method.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def write(self, output: str):
        """
        Write the given text to the logger, one record per line.
        """
        if output and output[-1] == "\n":
            output = output[:-1]
        for line in output.split("\n"):
            self.logger.info(line)


class BuildToolLogger(ConsoleLogger):
    """
    Writes undecorated lines for the build tool (e.g. make's $(info ...) lines).

    The lines are not sent through the root logger so that timestamps, levels
    and colors never end up in the output parsed by the build.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(BUILD_TOOL_LOGGER_NAME)
        self._set_logger_handlers(stream if stream is not None else sys.stdout)

    def _set_logger_handlers(self, stream: TextIO) -> None:
        self.logger.propagate = False
        self.logger.setLevel(logging.INFO)
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.logger.handlers.clear()
        self.logger.addHandler(handler)
