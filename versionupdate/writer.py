"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

import filecmp
import logging
import os
import shutil
import tempfile
from typing import List, Optional

from versionupdate import loggers
from versionupdate.config.models import DEFAULT_UTILITY_MODULE
from versionupdate.descriptor import VersionDescriptor, macro_prefix
from versionupdate.errors import HeaderWriteError, UsageError


GENERATED_WARNING = "//  Automagically generated by version-update!  Do not commit!"
LOGGER = logging.getLogger(__name__)


def _c_string(value: Optional[str]) -> str:
    if value is None:
        return ""
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def info_lines(descriptor: VersionDescriptor) -> List[str]:
    """
    Lines announcing the version for make, e.g. "$(info Building snapshot v2.2)".
    """
    if descriptor.commits is None:
        return [f"$(info Building {descriptor.label} {descriptor.version})"]

    line = (
        f"$(info Building {descriptor.label} {descriptor.version} "
        f"+{descriptor.commits} changes (r{descriptor.revision_count} {descriptor.hash1})"
    )
    # Unknown when git status could not be run
    if descriptor.dirty_state is not None:
        line += f" ({descriptor.dirty_state})"
    lines = [f"{line})"]
    for submodule in descriptor.submodules:
        lines.append(f"$(info $(space)         {submodule})")
    return lines


def version_string(descriptor: VersionDescriptor) -> str:
    """
    The human readable version, from the most to the least specific information available.
    """
    name = descriptor.module_name
    if descriptor.commits is not None:
        return (
            f"{name} {descriptor.label} {descriptor.version} +{descriptor.commits} changes "
            f"(r{descriptor.revision_count} {descriptor.hash1})"
        )
    if descriptor.hash1 is not None:
        return f"{name} snapshot ({descriptor.hash1})"
    if "release" in descriptor.label:
        return f"{name} {descriptor.major}.{descriptor.minor}"
    return f"{name} {descriptor.label} ({descriptor.version})"


class HeaderWriter:
    """
    Formats a version descriptor as a C header and updates the header file
    only when the formatted text differs from what is already there.
    """

    def __init__(
        self,
        utility_module: str = DEFAULT_UTILITY_MODULE,
        build_tool_log: Optional[loggers.ConsoleLogger] = None,
    ):
        self.utility_prefix = macro_prefix(utility_module)
        self._build_tool_log = build_tool_log

    @property
    def build_tool_log(self) -> loggers.ConsoleLogger:
        if self._build_tool_log is None:
            self._build_tool_log = loggers.BuildToolLogger()
        return self._build_tool_log

    def report(self, descriptor: VersionDescriptor) -> None:
        self.build_tool_log.write("\n".join(info_lines(descriptor)))

    def render(self, descriptor: VersionDescriptor) -> str:
        prefix = descriptor.macro_prefix

        def define(suffix: str, value: Optional[str]) -> str:
            return f'#define {prefix}_{suffix:<17} "{_c_string(value)}"'

        lines = [
            GENERATED_WARNING,
            define("VERSION_LABEL", descriptor.label),
            define("VERSION_MAJOR", descriptor.major),
            define("VERSION_MINOR", descriptor.minor),
            define("VERSION_COMMITS", descriptor.commits),
            define("VERSION_REVISION", str(descriptor.revision_count)),
            define("VERSION_HASH", descriptor.hash1),
            "",
            f'#define {prefix}_{"VERSION":<17} "{_c_string(version_string(descriptor))}\\n"',
        ]

        # Every other module makes the shared utility module report its version
        if prefix != self.utility_prefix:
            lines.extend(
                [
                    "",
                    f"#undef  {self.utility_prefix}_VERSION",
                    f"#define {self.utility_prefix}_VERSION {prefix}_VERSION",
                ]
            )
        return "\n".join(lines) + "\n"

    @staticmethod
    def _set_new_file_mode(new_file: str, version_file: str) -> None:
        # mkstemp creates the file 0600, give it the mode a plain open() would have
        if os.path.exists(version_file):
            shutil.copymode(version_file, new_file)
        else:
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(new_file, 0o666 & ~umask)

    def write(self, descriptor: VersionDescriptor, version_file: str) -> bool:
        """
        Write the header for the descriptor to version_file.

        The new contents are written next to version_file first and only moved over it
        when they differ, so an unchanged version does not touch the file (and does not
        trigger a rebuild of everything including it).

        :param descriptor: the version to write
        :param version_file: path of the header file
        :return: True if the file was replaced, False if it was left untouched
        """
        if not version_file:
            raise UsageError("a version file path is required")
        text = self.render(descriptor)
        version_dir = os.path.dirname(os.path.abspath(version_file))

        try:
            fd, new_file = tempfile.mkstemp(
                prefix=f"{os.path.basename(version_file)}.",
                suffix=".new",
                dir=version_dir,
            )
        except OSError as exc:
            raise HeaderWriteError(
                f"Failed to open a new file in '{version_dir}' for writing: {exc}"
            ) from exc

        try:
            with os.fdopen(fd, "w", encoding="utf8", newline="\n") as fobj:
                fobj.write(text)

            if os.path.isfile(version_file) and filecmp.cmp(
                version_file, new_file, shallow=False
            ):
                os.unlink(new_file)
                LOGGER.debug(f"{version_file} is up to date")
                return False

            self._set_new_file_mode(new_file, version_file)
            os.replace(new_file, version_file)
        except OSError as exc:
            if os.path.exists(new_file):
                os.unlink(new_file)
            raise HeaderWriteError(f"Failed to write '{version_file}': {exc}") from exc

        LOGGER.debug(f"Updated {version_file}")
        return True
