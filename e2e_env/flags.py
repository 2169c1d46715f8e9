import argparse
import os
import sys
from dataclasses import dataclass
from typing import List, Mapping, Optional

from e2e_env.config_file import load_flag_defaults
from e2e_env.logger import get_logger, set_verbose

logger = get_logger("flags")

DOCKER_REPO_ENV_VAR = "KO_DOCKER_REPO"
DEFAULT_TAG = "latest"

_TRUE_VALUES = ("1", "t", "true", "y", "yes")
_FALSE_VALUES = ("0", "f", "false", "n", "no")

BOOL_FLAGS = ("logverbose", "emitmetrics")


@dataclass(frozen=True)
class EnvironmentFlags:
    """Command line flags, or their defaults, for the e2e test environment."""

    cluster: str = ""  # K8s cluster (defaults to the cluster in kubeconfig)
    cluster_region: str = ""  # GCP cluster region used for deployment
    log_verbose: bool = False
    docker_repo: str = ""  # Docker repo (defaults to $KO_DOCKER_REPO)
    emit_metrics: bool = False
    tag: str = DEFAULT_TAG  # Docker image tag
    languages: str = ""  # Comma separated allow-list of languages to run


def bool_flag_converter(value: str) -> bool:
    """Convert a Go style boolean flag value, e.g. `-logverbose=false`."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(
        f"Invalid boolean value '{value}'. Valid options are: "
        f"{', '.join(_TRUE_VALUES + _FALSE_VALUES)}"
    )


def _add_bool_flag(parser: argparse.ArgumentParser, name: str, dest: str, help_text: str) -> None:
    parser.add_argument(f"-{name}", f"--{name}", dest=dest, action="store_true", help=help_text)
    # Target of `-name=false`, see expand_bool_flag_values.
    parser.add_argument(
        f"--no-{name}", dest=dest, action="store_false", default=False, help=argparse.SUPPRESS
    )


def expand_bool_flag_values(
    parser: argparse.ArgumentParser, argv: Optional[List[str]]
) -> List[str]:
    """
    Rewrite `-name=value` boolean flags into `-name` or `--no-name`.

    Bare boolean flags never consume the following argument, so `-logverbose ./pkg/...`
    leaves `./pkg/...` for the test runner. Arguments after `--` are not touched.
    """
    if argv is None:
        argv = sys.argv[1:]

    expanded = []
    for index, arg in enumerate(argv):
        if arg == "--":
            expanded.extend(argv[index:])
            break
        name, separator, value = arg.lstrip("-").partition("=")
        dashes = len(arg) - len(arg.lstrip("-"))
        if not separator or dashes not in (1, 2) or name not in BOOL_FLAGS:
            expanded.append(arg)
            continue
        try:
            enabled = bool_flag_converter(value)
        except argparse.ArgumentTypeError as e:
            parser.error(f"argument -{name}: {e}")
        expanded.append(f"-{name}" if enabled else f"--no-{name}")
    return expanded


def add_flags_file_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-flagsfile",
        "--flagsfile",
        dest="flags_file",
        default=None,
        help="Path to a YAML file with defaults for the flags below. "
        "Flags given on the command line take precedence.",
    )


def add_environment_args_to_parser(
    parser: argparse.ArgumentParser, environ: Optional[Mapping[str, str]] = None
) -> None:
    """
    Adds the e2e environment flags to `parser`.

    Every flag is accepted with one or two leading dashes, so both
    `-cluster=foo` and `--cluster foo` work.
    """
    if environ is None:
        environ = os.environ

    add_flags_file_arg(parser)
    parser.add_argument(
        "-cluster",
        "--cluster",
        dest="cluster",
        default="",
        help="Provide the cluster to test against. Defaults to the current cluster in kubeconfig.",
    )
    parser.add_argument(
        "-clusterregion",
        "--clusterregion",
        dest="cluster_region",
        default="",
        help="Provide the cluster region to test against.",
    )
    _add_bool_flag(
        parser,
        "logverbose",
        "log_verbose",
        "Set this flag to true if you would like to see verbose logging.",
    )
    _add_bool_flag(
        parser,
        "emitmetrics",
        "emit_metrics",
        "Set this flag to true if you would like tests to emit metrics, "
        "e.g. latency of resources being realized in the system.",
    )
    parser.add_argument(
        "-dockerrepo",
        "--dockerrepo",
        dest="docker_repo",
        default=environ.get(DOCKER_REPO_ENV_VAR, ""),
        help="Provide the uri of the docker repo you have uploaded the test image to. "
        f"Defaults to ${DOCKER_REPO_ENV_VAR}",
    )
    parser.add_argument(
        "-tag",
        "--tag",
        dest="tag",
        default=DEFAULT_TAG,
        help=f"Provide the version tag for the test images (default: {DEFAULT_TAG}).",
    )
    parser.add_argument(
        "-languages",
        "--languages",
        dest="languages",
        default="",
        help="Comma separated languages to run e2e test on. Empty runs all languages.",
    )


def build_args_parser(environ: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flags for the end-to-end test environment",
        allow_abbrev=False,
    )
    add_environment_args_to_parser(parser, environ)
    return parser


def apply_flags_file(parser: argparse.ArgumentParser, argv: Optional[List[str]]) -> None:
    """Replace the parser defaults with the values of `-flagsfile`, if one was given."""
    pre_parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    add_flags_file_arg(pre_parser)
    pre_args, _ = pre_parser.parse_known_args(argv)
    if pre_args.flags_file:
        parser.set_defaults(**load_flag_defaults(pre_args.flags_file))


def flags_from_namespace(args: argparse.Namespace) -> EnvironmentFlags:
    return EnvironmentFlags(
        cluster=args.cluster,
        cluster_region=args.cluster_region,
        log_verbose=args.log_verbose,
        docker_repo=args.docker_repo,
        emit_metrics=args.emit_metrics,
        tag=args.tag,
        languages=args.languages,
    )


def initialize_flags(
    argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None
) -> EnvironmentFlags:
    """
    Parse the e2e environment flags.

    Meant to be called once at startup; the returned value is shared by reference with
    everything that needs it. Arguments that are not environment flags are left for the
    test runner.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:]).
        environ: Environment to read defaults from (defaults to os.environ).

    Raises:
        ConfigFileError: If `-flagsfile` points to an invalid file.
    """
    parser = build_args_parser(environ)
    argv = expand_bool_flag_values(parser, argv)
    apply_flags_file(parser, argv)
    args, unknown = parser.parse_known_args(argv)
    flags = flags_from_namespace(args)

    set_verbose(flags.log_verbose)
    if unknown:
        logger.debug(f"Ignoring arguments that are not environment flags: {unknown}")
    logger.debug(f"Environment flags: {flags}")
    return flags
