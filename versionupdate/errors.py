"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

from typing import Optional


class VersionUpdateError(Exception):
    """Base version-update Exception"""
    pass


class UsageError(VersionUpdateError):
    """Error indicating a missing or empty command line argument"""
    pass


class VersionUpdateConfigurationError(VersionUpdateError):
    """Error indicating an issue with the version-update configuration"""
    pass


class RepoQueryError(VersionUpdateError):
    """
    Error indicating a git query could not be run or exited with an error
    """

    def __init__(self, query: str, message: str, returncode: Optional[int] = None):
        super().__init__(f"Failed to run '{query}': {message}")
        self.query = query
        # None when git could not be started
        self.returncode = returncode


class HeaderWriteError(VersionUpdateError):
    """Error indicating the header file could not be written"""
    pass
