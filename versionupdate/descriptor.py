"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict


Label = Literal["release", "snapshot", "branch", "master-snapshot"]


MACRO_PREFIX_TABLE = str.maketrans(
    "abcdefghijklmnopqrstuvwxyz-", "ABCDEFGHIJKLMNOPQRSTUVWXYZ_"
)


def macro_prefix(module_name: str) -> str:
    """
    Uppercase letters and turn hyphens into underscores, e.g. "my-module" => "MY_MODULE".
    """
    return module_name.translate(MACRO_PREFIX_TABLE)


def dirty_state(ahead: bool, changes: bool, remote_name: str = "remote") -> str:
    if ahead and changes:
        return f"ahead of {remote_name} w/changes"
    if ahead:
        return f"ahead of {remote_name}"
    if changes:
        return "w/changes"
    return f"sync'd with {remote_name}"


class VersionDescriptor(BaseModel):
    """
    The version of a module as derived from git, or from the name of the directory it was
    unpacked into. Instances are frozen, use model_copy(update=...) to derive a new one.
    """

    model_config = ConfigDict(frozen=True)

    module_name: str
    label: Label = "release"
    major: str
    minor: str
    version: str
    commits: Optional[str] = None
    revision_count: int = 0
    # From 'git describe'
    hash1: Optional[str] = None
    # From 'git rev-list'
    hash2: Optional[str] = None
    dirty_state: Optional[str] = None
    submodules: Tuple[str, ...] = ()

    @classmethod
    def initial(
        cls, module_name: str, major: str, minor: str, label: Label = "release"
    ) -> "VersionDescriptor":
        return cls(
            module_name=module_name,
            label=label,
            major=major,
            minor=minor,
            version=f"v{major}.{minor}",
        )

    @property
    def macro_prefix(self) -> str:
        return macro_prefix(self.module_name)
