import subprocess
from unittest import mock

import pytest

from versionupdate import inspector
from versionupdate.errors import RepoQueryError
from versionupdate.inspector import (
    CommitLog,
    DescribeResult,
    RepoInspector,
    StatusResult,
)


HASH = "0123456789abcdef0123456789abcdef01234567"


@pytest.mark.parametrize(
    "lines, result",
    [
        ([], CommitLog(0, None)),
        ([HASH], CommitLog(1, HASH)),
        (["a" * 40, "", "b" * 40, "c" * 40], CommitLog(3, "a" * 40)),
    ],
)
def test_parse_commit_log(lines, result):
    assert inspector.parse_commit_log(lines) == result


@pytest.mark.parametrize(
    "lines, result",
    [
        ([], None),
        ([f"v3.4-7-g{HASH}"], DescribeResult("3", "4", "7", HASH)),
        ([f"v2.2-0-g{HASH}\n"], DescribeResult("2", "2", "0", HASH)),
        # The minor version takes everything up to the commit count
        ([f"v1.9-rc1-12-g{HASH}"], DescribeResult("1", "9-rc1", "12", HASH)),
        # No tag, git describe --always prints the hash only
        ([HASH], DescribeResult("0", "0", "0", HASH)),
        (["release-1.0-3-gabc"], DescribeResult("0", "0", "0", "release-1.0-3-gabc")),
        # Short hashes do not match the tag format
        (["v3.4-7-gabcdef1"], DescribeResult("0", "0", "0", "v3.4-7-gabcdef1")),
        ([HASH, f"v3.4-7-g{HASH}"], DescribeResult("3", "4", "7", HASH)),
    ],
)
def test_parse_describe(lines, result):
    assert inspector.parse_describe(lines) == result


@pytest.mark.parametrize(
    "lines, result",
    [
        ([], StatusResult(False, False)),
        (
            [
                "On branch master",
                "Your branch is up to date with 'origin/master'.",
                "",
                "nothing to commit, working tree clean",
            ],
            StatusResult(False, False),
        ),
        (
            [
                "On branch master",
                "Your branch is ahead of 'origin/master' by 2 commits.",
            ],
            StatusResult(True, False),
        ),
        (
            [
                "On branch master",
                "Changes not staged for commit:",
                '  (use "git add <file>..." to update what will be committed)',
                "\tmodified:   src/main.C",
            ],
            StatusResult(False, True),
        ),
        (
            [
                "On branch master",
                "Your branch is ahead of 'origin/master' by 1 commit.",
                "Changes not staged for commit:",
                "\tmodified:   src/main.C",
            ],
            StatusResult(True, True),
        ),
    ],
)
def test_parse_status(lines, result):
    assert inspector.parse_status(lines) == result


@pytest.mark.parametrize(
    "lines, branch",
    [
        ([], None),
        (["* master"], "master"),
        (["  feature-x", "* master"], "feature-x"),
        (["* (HEAD detached at v2.1)", "  v2.1"], "v2.1"),
        (["* (HEAD detached from 1a2b3c4)", "  master"], "master"),
        (["* (HEAD detached at 1a2b3c4)"], None),
        (["", "   ", "  develop  "], "develop"),
    ],
)
def test_parse_branch(lines, branch):
    assert inspector.parse_branch(lines) == branch


@pytest.mark.parametrize(
    "branch, result",
    [
        ("master", None),
        ("v2.1", ("2", "1")),
        ("release/v10.20-fixes", ("10", "20")),
        ("v2", None),
    ],
)
def test_parse_release_branch(branch, result):
    assert inspector.parse_release_branch(branch) == result


def test_parse_submodules():
    lines = [
        f" {HASH} src/meryl (v1.4-2-g{HASH[:7]})",
        f"+{HASH} src/utility (heads/master)",
        f"-{HASH} src/uninitialized",
    ]
    assert inspector.parse_submodules(lines) == [
        f"src/meryl v1.4-2-g{HASH[:7]} {HASH}",
        f"src/utility heads/master +{HASH}",
    ]


@pytest.fixture(name="popen_mock")
def fixture_popen_mock():
    with mock.patch("versionupdate.inspector.subprocess.Popen") as popen_mock:
        process = popen_mock.return_value
        process.returncode = 0
        process.communicate.return_value = ("", "")
        yield popen_mock


@pytest.mark.parametrize(
    "method, args, stdout, result",
    [
        (
            "describe",
            ["describe", "--tags", "--long", "--always", "--abbrev=40"],
            f"v3.4-7-g{HASH}\n",
            DescribeResult("3", "4", "7", HASH),
        ),
        (
            "status",
            ["status"],
            "Your branch is ahead of 'origin/master' by 1 commit.\n",
            StatusResult(True, False),
        ),
        ("branch", ["branch", "--contains"], "* v2.1\n", "v2.1"),
        (
            "submodules",
            ["submodule", "status"],
            f" {HASH} src/meryl (v1.4)\n",
            [f"src/meryl v1.4 {HASH}"],
        ),
    ],
)
def test_repo_inspector_queries(popen_mock, method, args, stdout, result):
    popen_mock.return_value.communicate.return_value = (stdout, "")

    repo_inspector = RepoInspector("/work/canu/src", "/usr/bin/git")
    assert getattr(repo_inspector, method)() == result

    popen_mock.assert_called_once()
    call_kwargs = popen_mock.call_args.kwargs
    assert call_kwargs["args"] == ["/usr/bin/git", *args]
    assert call_kwargs["cwd"] == "/work/canu/src"
    assert call_kwargs["stdout"] == subprocess.PIPE
    assert call_kwargs["env"]["LC_ALL"] == "C"


def test_repo_inspector_nonzero_exit(popen_mock):
    popen_mock.return_value.returncode = 128
    popen_mock.return_value.communicate.return_value = (
        "",
        "fatal: not a git repository\n",
    )

    with pytest.raises(RepoQueryError) as exc_info:
        RepoInspector("/work").describe()
    assert exc_info.value.query == "describe"
    assert exc_info.value.returncode == 128
    assert "fatal: not a git repository" in str(exc_info.value)


def test_repo_inspector_nonzero_exit_without_message(popen_mock):
    popen_mock.return_value.returncode = 1

    with pytest.raises(RepoQueryError, match="exited with status 1"):
        RepoInspector("/work").status()


def test_repo_inspector_missing_git(popen_mock):
    popen_mock.side_effect = FileNotFoundError(2, "No such file or directory")

    with pytest.raises(RepoQueryError) as exc_info:
        RepoInspector("/work", "not-git").describe()
    assert exc_info.value.query == "describe"
    assert "No such file or directory" in str(exc_info.value)


def _process(returncode=0, stdout="", stderr=""):
    process = mock.MagicMock()
    process.returncode = returncode
    process.communicate.return_value = (stdout, stderr)
    return process


def test_repo_inspector_commit_log(popen_mock):
    popen_mock.side_effect = [
        _process(stdout=f"{HASH}\n"),
        _process(stdout=f"{HASH}\n{'f' * 40}\n"),
    ]

    repo_inspector = RepoInspector("/work/canu/src", "/usr/bin/git")
    assert repo_inspector.commit_log() == CommitLog(2, HASH)

    assert [call.kwargs["args"] for call in popen_mock.call_args_list] == [
        ["/usr/bin/git", "rev-parse", "--verify", "-q", "HEAD"],
        ["/usr/bin/git", "rev-list", "HEAD"],
    ]


def test_repo_inspector_commit_log_no_commits(popen_mock):
    # A repository right after 'git init'
    popen_mock.return_value.returncode = 1

    assert RepoInspector("/work").commit_log() == CommitLog(0, None)
    popen_mock.assert_called_once()


def test_repo_inspector_commit_log_broken_repository(popen_mock):
    popen_mock.return_value.returncode = 128
    popen_mock.return_value.communicate.return_value = (
        "",
        "fatal: not a git repository\n",
    )

    with pytest.raises(RepoQueryError) as exc_info:
        RepoInspector("/work").commit_log()
    assert exc_info.value.query == "commit-log"
    assert "fatal: not a git repository" in str(exc_info.value)


def test_repo_inspector_commit_log_missing_git(popen_mock):
    popen_mock.side_effect = FileNotFoundError(2, "No such file or directory")

    with pytest.raises(RepoQueryError) as exc_info:
        RepoInspector("/work", "not-git").commit_log()
    assert exc_info.value.query == "commit-log"
    assert exc_info.value.returncode is None
