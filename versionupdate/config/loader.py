"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

import logging
import os
from typing import Optional

import yaml

from versionupdate.errors import VersionUpdateConfigurationError


DEFAULT_CONFIG_FILE = "version-update.yaml"
LOGGER = logging.getLogger(__name__)


def _deep_merge_dicts(a_dict: dict, b_dict: dict, path=None) -> dict:
    if path is None:
        path = []
    for key in b_dict:
        if key in a_dict:
            if isinstance(a_dict[key], dict) and isinstance(b_dict[key], dict):
                _deep_merge_dicts(a_dict[key], b_dict[key], path + [str(key)])
            elif a_dict[key] != b_dict[key]:
                a_dict[key] = b_dict[key]
        else:
            a_dict[key] = b_dict[key]
    return a_dict


def load_config_file(cfg_file: str) -> dict:
    """
    Load a YAML configuration file, an empty file yields an empty dictionary.
    """
    try:
        with open(cfg_file, "r", encoding="utf8") as fobj:
            data = yaml.safe_load(fobj)
    except OSError as exc:
        raise VersionUpdateConfigurationError(
            f"The configuration file ({cfg_file}) could not be read: {exc}"
        ) from exc
    except yaml.YAMLError as exc:
        raise VersionUpdateConfigurationError(
            f"The {cfg_file} file contains malformed yaml, "
            f"please check the syntax and try again: {exc}"
        ) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise VersionUpdateConfigurationError(
            f"The configuration file ({cfg_file}) must contain a dictionary"
        )
    return data


def find_config_file(config_file: Optional[str], directory: str) -> Optional[str]:
    """
    Return the configuration file to load, if any.

    An explicitly given file must exist and, like any other path given on the
    command line, is relative to the current directory. The default file is
    looked up in the build directory and is optional.
    """
    if config_file:
        cfg_path = os.path.realpath(os.path.expanduser(config_file))
        if not os.path.exists(cfg_path):
            raise VersionUpdateConfigurationError(
                f"The specified configuration file ({config_file}) could not be found"
            )
        return cfg_path

    cfg_path = os.path.join(directory, DEFAULT_CONFIG_FILE)
    if os.path.exists(cfg_path):
        return cfg_path
    return None


def load_config_data(
    *, config_file: Optional[str], directory: str, config_overrides: dict
) -> dict:
    """
    Load the configuration file (if any) and merge the overrides on top of it.

    Returns:
      A dictionary of configuration
    """
    context = {}
    cfg_path = find_config_file(config_file, directory)
    if cfg_path:
        LOGGER.debug(f"Configuration is from: {cfg_path}")
        context = load_config_file(cfg_path)
    return _deep_merge_dicts(context, config_overrides)
