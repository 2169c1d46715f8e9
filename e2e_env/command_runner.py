"""
Running external CLIs (kubectl, gcloud) on behalf of the environment resolver.

`TestEnvironment` only depends on the `CommandRunner` protocol, so tests can
substitute canned output for the real tools.
"""
import subprocess
from typing import List, Protocol

from e2e_env.errors import CommandError
from e2e_env.logger import get_logger

logger = get_logger("command_runner")


class CommandRunner(Protocol):
    def run(self, argv: List[str]) -> str:
        """Run `argv` and return its combined stdout and stderr.

        Raises:
            CommandError: If the command cannot be started or exits with a non-zero code.
        """
        ...


class SubprocessCommandRunner:
    """Runs commands with `subprocess.run`, blocking until they exit."""

    def run(self, argv: List[str]) -> str:
        logger.debug(f"Running command: {' '.join(argv)}")
        try:
            result = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise CommandError(argv, e.returncode, e.stdout or "") from e
        except OSError as e:
            raise CommandError(argv, None, str(e)) from e
        return result.stdout
