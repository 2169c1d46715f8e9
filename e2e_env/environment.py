from typing import Dict, Optional

from e2e_env.command_runner import CommandRunner, SubprocessCommandRunner
from e2e_env.errors import ClusterNameError, ClusterRegionError, CommandError
from e2e_env.flags import EnvironmentFlags
from e2e_env.logger import get_logger

logger = get_logger("environment")

CURRENT_CONTEXT_CMD = ["kubectl", "config", "current-context"]
LIST_CLUSTERS_CMD = ["gcloud", "container", "clusters", "list", "--format=value(NAME,LOCATION)"]

# GKE kubectl contexts look like gke_<project>_<location>_<cluster>.
CONTEXT_DELIMITER = "_"


class TestEnvironment:
    """
    Values derived from the e2e environment flags.

    Cluster name and region fall back to kubectl and gcloud when the flags leave them
    empty; commands run through `runner`, so tests can provide canned output.
    """

    # Keep pytest from collecting this class.
    __test__ = False

    def __init__(self, flags: EnvironmentFlags, runner: Optional[CommandRunner] = None) -> None:
        self.flags = flags
        self.runner = runner if runner is not None else SubprocessCommandRunner()

    def image_path(self, name: str) -> str:
        """Prefix the image name with the docker repo and suffix it with the tag."""
        return f"{self.flags.docker_repo}/{name}:{self.flags.tag}"

    def cluster_name(self) -> str:
        """
        Get the cluster name, either from the flags or from the current kubectl context.

        Raises:
            ClusterNameError: If kubectl fails or the context has no underscore.
        """
        if self.flags.cluster:
            return self.flags.cluster

        try:
            output = self.runner.run(CURRENT_CONTEXT_CMD)
        except CommandError as e:
            raise ClusterNameError(f"error getting cluster name from kubectl: {e}") from e

        context = output.rstrip(" \n\r")
        index = context.rfind(CONTEXT_DELIMITER)
        if index == -1:
            raise ClusterNameError(
                f"there should be at least 1 underscore in kubectl context '{context}'"
            )
        cluster_name = context[index + 1 :]
        logger.debug(f"Cluster name '{cluster_name}' taken from kubectl context '{context}'")
        return cluster_name

    def cluster_region(self) -> str:
        """
        Get the cluster region, either from the flags or by looking the cluster up in gcloud.

        Returns an empty string when gcloud does not list the cluster.

        Raises:
            ClusterRegionError: If gcloud fails.
            ClusterNameError: If the cluster name is needed and cannot be resolved.
        """
        if self.flags.cluster_region:
            return self.flags.cluster_region

        try:
            output = self.runner.run(LIST_CLUSTERS_CMD)
        except CommandError as e:
            raise ClusterRegionError(f"error getting cluster region from gcloud: {e}") from e

        cluster_name = None
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            if cluster_name is None:
                cluster_name = self.cluster_name()
            if parts[0] == cluster_name:
                logger.debug(f"Cluster '{cluster_name}' is located in '{parts[1]}'")
                return parts[1]

        if cluster_name is None:
            logger.warning("gcloud listed no clusters")
        else:
            logger.warning(f"Cluster '{cluster_name}' not found in gcloud cluster list")
        return ""

    def whitelisted_languages(self) -> Dict[str, bool]:
        """
        Map every language of the `languages` flag to True.

        An empty mapping means no filter: every language should run.
        """
        if not self.flags.languages:
            return {}
        return {language: True for language in self.flags.languages.split(",")}

    def language_enabled(self, language: str) -> bool:
        whitelist = self.whitelisted_languages()
        return not whitelist or whitelist.get(language, False)
