#!/usr/bin/env python3
"""
Print the resolved e2e test environment.

Examples:
  python -m e2e_env -cluster my-cluster -clusterregion us-central1 --image helloworld
  KO_DOCKER_REPO=gcr.io/my-project python -m e2e_env --image helloworld --output json
"""
import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import yaml

from e2e_env.environment import TestEnvironment
from e2e_env.errors import EnvironmentConfigError
from e2e_env.flags import (
    add_environment_args_to_parser,
    apply_flags_file,
    expand_bool_flag_values,
    flags_from_namespace,
)
from e2e_env.logger import configure_logging, get_logger

logger = get_logger("main")


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="e2e-env",
        description="Resolve and print the e2e test environment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
        allow_abbrev=False,
    )
    add_environment_args_to_parser(parser)
    parser.add_argument(
        "--image",
        action="append",
        default=[],
        help="Test image name to build a reference for. Can be specified multiple times.",
    )
    parser.add_argument(
        "--output",
        choices=["yaml", "json"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    return parser


def describe_environment(env: TestEnvironment, images: List[str]) -> Dict[str, Any]:
    return {
        "cluster": env.cluster_name(),
        "cluster_region": env.cluster_region(),
        "docker_repo": env.flags.docker_repo,
        "tag": env.flags.tag,
        "emit_metrics": env.flags.emit_metrics,
        "languages": sorted(env.whitelisted_languages()),
        "images": {name: env.image_path(name) for name in images},
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_cli_parser()
    try:
        argv = expand_bool_flag_values(parser, argv)
        apply_flags_file(parser, argv)
        args = parser.parse_args(argv)
        flags = flags_from_namespace(args)
        configure_logging(verbose=flags.log_verbose)

        env = TestEnvironment(flags)
        description = describe_environment(env, args.image)
    except EnvironmentConfigError as e:
        logger.error(str(e))
        return 1

    if args.output == "json":
        print(json.dumps(description, indent=2))
    else:
        print(yaml.safe_dump(description, sort_keys=False), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
