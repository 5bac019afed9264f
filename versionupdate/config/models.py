"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from versionupdate.descriptor import Label


DEFAULT_UTILITY_MODULE = "meryl-utility"
QUERY_NAMES = ("commit-log", "describe", "status", "branch", "submodules")

FailureAction = Literal["fatal", "tolerate"]


class QueryFailurePolicy(BaseModel, extra="forbid"):
    """
    What to do when a git query cannot be run. The commit enumeration is
    required, the other queries only add descriptive metadata.
    """

    commit_log: FailureAction = Field(alias="commit-log", default="fatal")
    describe: FailureAction = "tolerate"
    status: FailureAction = "tolerate"
    branch: FailureAction = "tolerate"
    submodules: FailureAction = "tolerate"

    def is_fatal(self, query: str) -> bool:
        return getattr(self, query.replace("-", "_")) == "fatal"

    @classmethod
    def strict(cls) -> "QueryFailurePolicy":
        return cls(**{query: "fatal" for query in QUERY_NAMES})


class VersionUpdateConfig(BaseModel, extra="forbid"):
    """Top level version-update config model"""

    default_label: Label = Field(alias="default-label", default="release")
    # Bump before release.
    default_major: str = Field(alias="default-major", default="2")
    default_minor: str = Field(alias="default-minor", default="2")
    main_branch: str = Field(alias="main-branch", default="master")
    remote_name: str = Field(alias="remote-name", default="remote")
    utility_module: str = Field(alias="utility-module", default=DEFAULT_UTILITY_MODULE)
    # Relative to the inspected directory; builds run from <repo>/src
    vcs_dir: str = Field(alias="vcs-dir", default="../.git")
    git_executable: str = Field(alias="git-executable", default="git")
    query_failures: QueryFailurePolicy = Field(
        QueryFailurePolicy(), alias="query-failures"
    )

    @field_validator("default_major", "default_minor", mode="before")
    @classmethod
    def coerce_version_number(cls, val) -> Optional[str]:
        # YAML turns unquoted version numbers into ints
        if isinstance(val, int) and not isinstance(val, bool):
            return str(val)
        return val

    @field_validator("utility_module", "main_branch", "git_executable")
    @classmethod
    def validate_not_empty(cls, val: str) -> str:
        if not val.strip():
            raise ValueError("must not be empty")
        return val


def get_validation_errors(exc: ValidationError) -> List[str]:
    """Get validation errors as a list of printable lines"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(item) for item in error["loc"])
        if error["type"] == "extra_forbidden":
            errors.append(
                f"  {field}:  not a valid field, please check the spelling and documentation"
            )
        else:
            errors.append(f"  {field}:  {error['msg']} ({error['type']})")
    return errors


def generate_and_validate_config(
    **kwargs,
) -> Tuple[Optional[VersionUpdateConfig], Optional[List[str]]]:
    try:
        return VersionUpdateConfig(**kwargs), None
    except ValidationError as exc:
        return None, get_validation_errors(exc)
