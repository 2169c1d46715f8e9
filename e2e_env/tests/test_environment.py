import os
import sys

import dataclasses
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from e2e_env.environment import CURRENT_CONTEXT_CMD, LIST_CLUSTERS_CMD, TestEnvironment
from e2e_env.errors import ClusterNameError, ClusterRegionError
from test_utils import EnvTestUtils, failing_command


def make_env(runner=None, **flag_overrides) -> TestEnvironment:
    flags = dataclasses.replace(EnvTestUtils.FLAGS, **flag_overrides)
    return TestEnvironment(flags, runner if runner is not None else EnvTestUtils.runner())


class TestImagePath(unittest.TestCase):
    def test_image_path_prefixes_repo_and_appends_tag(self):
        env = make_env()
        self.assertEqual(env.image_path("helloworld"), "gcr.io/knative-tests/helloworld:v0.1")

    def test_image_path_keeps_values_verbatim(self):
        env = make_env(docker_repo="localhost:5000/", tag="")
        self.assertEqual(env.image_path("a/b"), "localhost:5000//a/b:")


class TestClusterName(unittest.TestCase):
    def test_cluster_flag_is_used_without_running_kubectl(self):
        runner = EnvTestUtils.runner()
        env = make_env(runner, cluster="foo")

        self.assertEqual(env.cluster_name(), "foo")
        self.assertEqual(runner.calls, [])

    def test_cluster_name_taken_from_last_segment_of_context(self):
        runner = EnvTestUtils.runner()
        env = make_env(runner)

        self.assertEqual(env.cluster_name(), "my-cluster")
        self.assertEqual(runner.calls, [CURRENT_CONTEXT_CMD])

    def test_trailing_whitespace_is_stripped_from_context(self):
        env = make_env(EnvTestUtils.runner(context="gke_p_z_my-cluster \r\n"))
        self.assertEqual(env.cluster_name(), "my-cluster")

    def test_context_without_underscore_raises(self):
        env = make_env(EnvTestUtils.runner(context="minikube\n"))
        with self.assertRaisesRegex(
            ClusterNameError, "there should be at least 1 underscore in kubectl context 'minikube'"
        ):
            env.cluster_name()

    def test_kubectl_failure_raises(self):
        env = make_env(EnvTestUtils.runner(context=failing_command(CURRENT_CONTEXT_CMD)))
        with self.assertRaisesRegex(ClusterNameError, "error getting cluster name from kubectl"):
            env.cluster_name()


class TestClusterRegion(unittest.TestCase):
    def test_region_flag_is_used_without_running_commands(self):
        runner = EnvTestUtils.runner()
        env = make_env(runner, cluster_region="europe-west4")

        self.assertEqual(env.cluster_region(), "europe-west4")
        self.assertEqual(runner.calls, [])

    def test_region_looked_up_for_cluster_from_context(self):
        runner = EnvTestUtils.runner()
        env = make_env(runner)

        self.assertEqual(env.cluster_region(), "us-central1")
        self.assertEqual(runner.calls, [LIST_CLUSTERS_CMD, CURRENT_CONTEXT_CMD])

    def test_region_looked_up_for_cluster_flag(self):
        env = make_env(cluster="other-cluster")
        self.assertEqual(env.cluster_region(), "europe-west1")

    def test_fields_may_be_separated_by_tabs_and_crlf(self):
        env = make_env(EnvTestUtils.runner(clusters="my-cluster\tus-east1\r\n"))
        self.assertEqual(env.cluster_region(), "us-east1")

    def test_no_matching_cluster_returns_empty_string(self):
        env = make_env(EnvTestUtils.runner(clusters="other-cluster europe-west1\n"))
        self.assertEqual(env.cluster_region(), "")

    def test_empty_cluster_list_returns_empty_string(self):
        runner = EnvTestUtils.runner(clusters="")
        env = make_env(runner)

        self.assertEqual(env.cluster_region(), "")
        self.assertEqual(runner.calls, [LIST_CLUSTERS_CMD])

    def test_gcloud_failure_raises(self):
        env = make_env(EnvTestUtils.runner(clusters=failing_command(LIST_CLUSTERS_CMD)))
        with self.assertRaisesRegex(ClusterRegionError, "error getting cluster region from gcloud"):
            env.cluster_region()

    def test_cluster_name_failure_propagates(self):
        env = make_env(EnvTestUtils.runner(context="minikube"))
        with self.assertRaises(ClusterNameError):
            env.cluster_region()


class TestWhitelistedLanguages(unittest.TestCase):
    def test_languages_are_split_on_commas(self):
        env = make_env(languages="go,java")
        self.assertEqual(env.whitelisted_languages(), {"go": True, "java": True})

    def test_empty_languages_gives_empty_whitelist(self):
        env = make_env(languages="")
        self.assertEqual(env.whitelisted_languages(), {})

    def test_empty_whitelist_enables_every_language(self):
        env = make_env(languages="")
        self.assertTrue(env.language_enabled("python"))

    def test_language_enabled_only_for_listed_languages(self):
        env = make_env(languages="go,java")
        self.assertTrue(env.language_enabled("go"))
        self.assertFalse(env.language_enabled("python"))


if __name__ == "__main__":
    unittest.main()
