"""
Copyright 2024 Adobe
All Rights Reserved.

NOTICE: Adobe permits you to use, modify, and distribute this file in accordance
with the terms of the Adobe license agreement accompanying it.
"""

import argparse
import os
import sys

from . import (
    __version__,
    HeaderWriteError,
    HeaderWriter,
    RepoQueryError,
    UsageError,
    VersionResolver,
    VersionUpdateConfigurationError,
)
from versionupdate import loggers
from versionupdate.config import QueryFailurePolicy, load_config


def parse_args(argv):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog=os.path.basename(argv[0]),
        description="version-update writes a C header describing the version of a module, "
        "as determined from git or from the name of the source directory",
    )

    parser.add_argument(
        "module_name",
        nargs="?",
        default=None,
        help='name of the module, used in the version string and macro names (e.g. "canu")',
    )

    parser.add_argument(
        "version_file",
        nargs="?",
        default=None,
        help="header file to write, it is only replaced when the contents change",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        dest="config_file",
        help=(
            "configuration file, relative to the current directory "
            '(defaults to "version-update.yaml" in the build directory, if present)'
        ),
    )

    parser.add_argument(
        "-d",
        "--directory",
        default=os.getcwd(),
        dest="directory",
        help="directory to determine the version for (defaults to current working directory)",
    )

    parser.add_argument(
        "--utility-module",
        default=None,
        dest="utility_module",
        help="module whose VERSION macro is aliased to this module's VERSION macro",
    )

    parser.add_argument(
        "--remote-name",
        default=None,
        dest="remote_name",
        help='name of the remote used when reporting unpushed changes (defaults to "remote")',
    )

    parser.add_argument(
        "--strict",
        default=False,
        action="store_true",
        dest="strict",
        help="fail when any git query fails (by default only the commit listing is required)",
    )

    parser.add_argument(
        "--dry-run",
        default=False,
        action="store_true",
        dest="dry_run",
        help="print the header instead of writing it",
    )

    parser.add_argument(
        "-x",
        "--debug",
        dest="debug",
        action="store_true",
        help="enables debug logging",
    )

    parser.add_argument(
        "--disable-timestamps",
        default=False,
        action="store_true",
        dest="disable_timestamps",
        help="disables printing of timestamps in the logging output",
    )

    parser.add_argument(
        "--no-color",
        default=False,
        action="store_true",
        dest="no_log_color",
        help="disable colors when logging",
    )

    parser.add_argument(
        "--version",
        default=False,
        action="store_true",
        dest="print_version",
        help="print the current version-update version and exit",
    )

    args = parser.parse_args(argv[1:])
    args.prog = parser.prog
    args.directory = os.path.realpath(args.directory)
    return args


def _get_config_overrides(args: argparse.Namespace) -> dict:
    """
    Creates a dictionary of overrides to be deeply merged into the loaded config file data.
    Undefined values are left out so they do not override configured values.
    :param args: the parsed CLI args
    :return: the overrides (if any specified)
    """
    overrides = {
        "utility-module": args.utility_module,
        "remote-name": args.remote_name,
    }
    if args.strict:
        overrides["query-failures"] = QueryFailurePolicy.strict().model_dump(
            by_alias=True
        )
    return {key: value for key, value in overrides.items() if value is not None}


def _check_required_args(args: argparse.Namespace) -> None:
    if not args.module_name:
        raise UsageError("a module name is required")
    if not args.version_file:
        raise UsageError("a version file is required")


def run(args: argparse.Namespace) -> None:
    _check_required_args(args)
    config = load_config(
        directory=args.directory,
        config_file=args.config_file,
        config_overrides=_get_config_overrides(args),
    )

    descriptor = VersionResolver(
        module_name=args.module_name,
        directory=args.directory,
        config=config,
    ).resolve()

    writer = HeaderWriter(config.utility_module)
    writer.report(descriptor)
    if args.dry_run:
        sys.stdout.write(writer.render(descriptor))
    else:
        writer.write(descriptor, args.version_file)


def main(argv):
    """Main program execution."""
    args = parse_args(argv)

    # are we just printing the version?
    if args.print_version:
        print(__version__)
        return os.EX_OK

    loggers.initialize_root_logger(
        args.debug, args.no_log_color, args.disable_timestamps
    )

    try:
        run(args)
    except UsageError as err:
        sys.stderr.write(f"ERROR: {err}\n")
        sys.stderr.write(f"usage: {args.prog} module-name version-file.H\n")
        return os.EX_USAGE
    except VersionUpdateConfigurationError as err:
        sys.stderr.write(f"ERROR: {err}\n")
        return os.EX_CONFIG
    except RepoQueryError as err:
        sys.stderr.write(f"ERROR: {err}\n")
        return os.EX_UNAVAILABLE
    except HeaderWriteError as err:
        sys.stderr.write(f"ERROR: {err}\n")
        return os.EX_CANTCREAT
    return os.EX_OK


if __name__ == "__main__":
    sys.exit(main(sys.argv))
