"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.

Queries git for the state of the repository.

Each query is a method on RepoInspector that returns a structured result. The
text parsing is done by the module level parse_* functions so that it can be
exercised without a repository.
"""

import logging
import os
import re
import subprocess
from typing import Iterable, List, NamedTuple, Optional, Tuple

from versionupdate.errors import RepoQueryError


LOGGER = logging.getLogger(__name__)

DESCRIBE_REGEX = re.compile(r"^v(\d+)\.(.+)-(\d+)-g([0-9a-fA-F]{40})$")
STATUS_AHEAD_REGEX = re.compile(r"is\s+ahead\s")
STATUS_CHANGES_REGEX = re.compile(r"not\s+staged\s+for\s+commit")
BRANCH_DETACHED_REGEX = re.compile(r"detached\s(at|from)\s")
RELEASE_BRANCH_REGEX = re.compile(r"v(\d+)\.(\d+)")
SUBMODULE_REGEX = re.compile(r"^(.*)\s+(.*)\s+\((.*)\)$")


class CommitLog(NamedTuple):
    count: int
    first_hash: Optional[str]


class DescribeResult(NamedTuple):
    major: str
    minor: str
    commits: str
    hash: str


class StatusResult(NamedTuple):
    ahead: bool
    changes: bool


def parse_commit_log(lines: Iterable[str]) -> CommitLog:
    """
    Count the commits listed by 'git rev-list' and keep the first one listed.
    """
    count = 0
    first_hash = None
    for line in lines:
        line = line.strip()
        if not line:
            continue
        if first_hash is None:
            first_hash = line
        count += 1
    return CommitLog(count, first_hash)


def parse_describe(lines: Iterable[str]) -> Optional[DescribeResult]:
    """
    Parse 'git describe --tags --long --always --abbrev=40' output.

    A "v<major>.<minor>-<commits>-g<hash>" line gives all four values, anything else
    (no tag found, so git printed just the hash) is taken as the hash with a 0.0 version.
    When several lines are printed the last one wins.
    """
    result = None
    for line in lines:
        line = line.rstrip("\r\n")
        match = DESCRIBE_REGEX.match(line)
        if match:
            result = DescribeResult(*match.groups())
        else:
            result = DescribeResult("0", "0", "0", line)
    return result


def parse_status(lines: Iterable[str]) -> StatusResult:
    ahead = False
    changes = False
    for line in lines:
        if STATUS_AHEAD_REGEX.search(line):
            ahead = True
        if STATUS_CHANGES_REGEX.search(line):
            changes = True
    return StatusResult(ahead, changes)


def parse_branch(lines: Iterable[str]) -> Optional[str]:
    """
    Return the first branch listed by 'git branch --contains', ignoring detached HEAD entries.
    """
    for line in lines:
        if BRANCH_DETACHED_REGEX.search(line):
            continue
        # Remove * from "* master"
        branch = line.replace("*", "").strip()
        if branch:
            return branch
    return None


def parse_release_branch(branch: str) -> Optional[Tuple[str, str]]:
    """
    Return the (major, minor) of a release branch name like "v2.1", otherwise None.
    """
    match = RELEASE_BRANCH_REGEX.search(branch)
    if not match:
        return None
    return match.group(1), match.group(2)


def parse_submodules(lines: Iterable[str]) -> List[str]:
    """
    Reorder each 'git submodule status' line "<commit> <path> (<describe>)"
    into "<path> <describe> <commit>" for display.
    """
    submodules = []
    for line in lines:
        match = SUBMODULE_REGEX.match(line.rstrip("\r\n"))
        if match:
            commit, path, describe = (group.strip() for group in match.groups())
            submodules.append(f"{path} {describe} {commit}")
    return submodules


class RepoInspector:
    """
    Runs the git queries in a directory.
    """

    def __init__(self, directory: str, git_executable: str = "git"):
        self.directory = directory
        self.git_executable = git_executable

    def _run(self, query: str, *args: str) -> List[str]:
        cmd_args = [self.git_executable, *args]
        LOGGER.debug(f"Running '{' '.join(cmd_args)}' in {self.directory}")
        try:
            cmd = subprocess.Popen(
                args=cmd_args,
                cwd=self.directory,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                encoding="utf8",
                errors="replace",
                # The status and branch output is matched against English text
                env={**os.environ, "LC_ALL": "C"},
            )
            stdout, stderr = cmd.communicate()
        except OSError as exc:
            raise RepoQueryError(query, str(exc)) from exc
        if cmd.returncode != 0:
            message = stderr.strip() or f"exited with status {cmd.returncode}"
            raise RepoQueryError(query, message, cmd.returncode)
        return stdout.splitlines()

    def has_commits(self) -> bool:
        """
        Whether HEAD points at a commit. It does not in a repository where nothing
        has been committed yet.
        """
        try:
            self._run("commit-log", "rev-parse", "--verify", "-q", "HEAD")
        except RepoQueryError as exc:
            # --verify -q exits 1 for an unborn HEAD, 128 for a broken repository
            if exc.returncode == 1:
                return False
            raise
        return True

    def commit_log(self) -> CommitLog:
        if not self.has_commits():
            LOGGER.debug(f"No commits yet in {self.directory}")
            return CommitLog(0, None)
        return parse_commit_log(self._run("commit-log", "rev-list", "HEAD"))

    def describe(self) -> Optional[DescribeResult]:
        return parse_describe(
            self._run(
                "describe", "describe", "--tags", "--long", "--always", "--abbrev=40"
            )
        )

    def status(self) -> StatusResult:
        return parse_status(self._run("status", "status"))

    def branch(self) -> Optional[str]:
        return parse_branch(self._run("branch", "branch", "--contains"))

    def submodules(self) -> List[str]:
        return parse_submodules(self._run("submodules", "submodule", "status"))
