"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

from typing import Optional

from versionupdate.errors import VersionUpdateConfigurationError
from .loader import DEFAULT_CONFIG_FILE, load_config_data
from .models import (
    generate_and_validate_config,
    QueryFailurePolicy,
    VersionUpdateConfig,
)


def load_config(
    *,
    directory: str,
    config_file: Optional[str] = None,
    config_overrides: Optional[dict] = None,
) -> VersionUpdateConfig:
    """
    Load and validate the configuration for a run.

    :param directory: the directory being inspected, relative config paths start here
    :param config_file: an explicit configuration file
    :param config_overrides: values (using the file's field names) that win over the file
    """
    config, errors = generate_and_validate_config(
        **load_config_data(
            config_file=config_file,
            directory=directory,
            config_overrides=config_overrides or {},
        )
    )
    if errors:
        errors_str = "\n".join(errors)
        raise VersionUpdateConfigurationError(
            f"Invalid configuration, {len(errors)} error(s) found:\n{errors_str}"
        )
    return config


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "QueryFailurePolicy",
    "VersionUpdateConfig",
    "load_config",
]
