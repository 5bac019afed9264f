"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

import importlib.machinery
import os
import types

from versionupdate.descriptor import VersionDescriptor
from versionupdate.errors import (
    HeaderWriteError,
    RepoQueryError,
    UsageError,
    VersionUpdateConfigurationError,
    VersionUpdateError,
)
from versionupdate.inspector import RepoInspector
from versionupdate.resolver import VersionResolver
from versionupdate.writer import HeaderWriter


__version__ = "DEVELOPMENT"
try:
    _VERSION_FILE = os.path.join(os.path.dirname(__file__), "version.py")
    if os.path.exists(_VERSION_FILE):
        loader = importlib.machinery.SourceFileLoader(
            "versionupdateversion", _VERSION_FILE
        )
        _VERSION_MOD = types.ModuleType(loader.name)
        loader.exec_module(_VERSION_MOD)
        __version__ = getattr(_VERSION_MOD, "__version__", __version__)
except Exception:  # pylint: disable=broad-except
    pass
