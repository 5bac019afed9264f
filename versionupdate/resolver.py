"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

import functools
import logging
import os
import re
from typing import Callable, List, Optional, Tuple

from versionupdate.config import VersionUpdateConfig
from versionupdate.descriptor import VersionDescriptor, dirty_state
from versionupdate.errors import RepoQueryError, UsageError
from versionupdate.inspector import (
    CommitLog,
    DescribeResult,
    RepoInspector,
    StatusResult,
    parse_release_branch,
)


LOGGER = logging.getLogger(__name__)


def apply_commit_log(
    descriptor: VersionDescriptor, commit_log: CommitLog
) -> VersionDescriptor:
    return descriptor.model_copy(
        update={"revision_count": commit_log.count, "hash2": commit_log.first_hash}
    )


def apply_describe(
    descriptor: VersionDescriptor, describe: Optional[DescribeResult]
) -> VersionDescriptor:
    if describe is None:
        return descriptor
    return descriptor.model_copy(
        update={
            "major": describe.major,
            "minor": describe.minor,
            "commits": describe.commits,
            "hash1": describe.hash,
            "version": f"v{describe.major}.{describe.minor}",
        }
    )


def apply_status(
    descriptor: VersionDescriptor, status: StatusResult, remote_name: str = "remote"
) -> VersionDescriptor:
    return descriptor.model_copy(
        update={"dirty_state": dirty_state(status.ahead, status.changes, remote_name)}
    )


def apply_branch(
    descriptor: VersionDescriptor, branch: Optional[str], main_branch: str = "master"
) -> VersionDescriptor:
    """
    Anything but the main branch is labeled with the branch name. Release branches
    (e.g. "v2.1") also supply the major and minor versions.
    """
    if not branch or branch == main_branch:
        return descriptor
    update = {"label": "branch", "version": branch}
    release = parse_release_branch(branch)
    if release:
        update["major"], update["minor"] = release
    return descriptor.model_copy(update=update)


def apply_submodules(
    descriptor: VersionDescriptor, submodules: List[str]
) -> VersionDescriptor:
    return descriptor.model_copy(update={"submodules": tuple(submodules)})


def apply_directory_name(
    descriptor: VersionDescriptor, directory: str
) -> VersionDescriptor:
    """
    Outside of git, a source tarball unpacked as "<module>-<hash>/src" or
    "<module>-master/src" still tells us where it came from.
    """
    path = directory.replace(os.sep, "/")
    module = re.escape(descriptor.module_name)

    match = re.search(rf"{module}-([0-9a-fA-F]{{40}})/src", path)
    if match:
        return descriptor.model_copy(
            update={
                "label": "snapshot",
                "hash1": match.group(1),
                "hash2": match.group(1),
            }
        )
    if re.search(rf"{module}-master/src", path):
        return descriptor.model_copy(update={"label": "master-snapshot"})
    return descriptor


class VersionResolver:
    """
    Derives the version descriptor of a module from the repository it is built in.
    """

    def __init__(
        self,
        *,
        module_name: str,
        directory: str,
        config: VersionUpdateConfig,
        inspector: Optional[RepoInspector] = None,
    ):
        if not module_name:
            raise UsageError("a module name is required")
        self.module_name = module_name
        self.directory = directory
        self.config = config
        self.inspector = inspector or RepoInspector(directory, config.git_executable)

    @property
    def vcs_dir(self) -> str:
        return os.path.normpath(os.path.join(self.directory, self.config.vcs_dir))

    def _repo_steps(self) -> List[Tuple[str, Callable, Callable]]:
        return [
            ("commit-log", self.inspector.commit_log, apply_commit_log),
            ("describe", self.inspector.describe, apply_describe),
            (
                "status",
                self.inspector.status,
                functools.partial(apply_status, remote_name=self.config.remote_name),
            ),
            (
                "branch",
                self.inspector.branch,
                functools.partial(apply_branch, main_branch=self.config.main_branch),
            ),
            ("submodules", self.inspector.submodules, apply_submodules),
        ]

    def _resolve_from_repo(self, descriptor: VersionDescriptor) -> VersionDescriptor:
        descriptor = descriptor.model_copy(update={"label": "snapshot"})
        for query, run_query, apply_step in self._repo_steps():
            try:
                result = run_query()
            except RepoQueryError as err:
                if self.config.query_failures.is_fatal(query):
                    raise
                LOGGER.warning(f"{err} (continuing without the {query} information)")
                continue
            descriptor = apply_step(descriptor, result)
        return descriptor

    def resolve(self) -> VersionDescriptor:
        descriptor = VersionDescriptor.initial(
            self.module_name,
            self.config.default_major,
            self.config.default_minor,
            self.config.default_label,
        )

        if os.path.exists(self.vcs_dir):
            LOGGER.debug(f"Found {self.vcs_dir}, using git to determine the version")
            descriptor = self._resolve_from_repo(descriptor)
        else:
            descriptor = apply_directory_name(descriptor, self.directory)

        LOGGER.debug(f"Resolved version: {descriptor!r}")
        return descriptor
