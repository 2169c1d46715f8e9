from typing import List, Optional


class EnvironmentConfigError(RuntimeError):
    """Unrecoverable problem while resolving the e2e environment."""


class CommandError(EnvironmentConfigError):
    """An external command could not be started or exited with a non-zero code."""

    def __init__(self, argv: List[str], returncode: Optional[int], output: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output
        message = f"Command failed: {' '.join(self.argv)}"
        if returncode is not None:
            message += f" (exit code {returncode})"
        if output:
            message += f"\noutput: {output.rstrip()}"
        super().__init__(message)


class ClusterNameError(EnvironmentConfigError):
    pass


class ClusterRegionError(EnvironmentConfigError):
    pass


class ConfigFileError(EnvironmentConfigError):
    pass
