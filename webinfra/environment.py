"""
CI/CD execution environment detection.

Pipeline execution is detected from the environment variables common CI
systems set. Detection can be overridden with the "force.local" and
"force.pipeline" settings; "force.local" takes precedence.
"""

from .log import get_library_lg
from .settings import FORCE_LOCAL, FORCE_PIPELINE, EnvironSettings, Settings

# Checked in order; first match names the CI system
_CI_SYSTEMS: list[tuple[tuple[str, ...], str]] = [
    (("JENKINS_HOME", "JENKINS_URL"), "Jenkins"),
    (("GITLAB_CI",), "GitLab CI"),
    (("GITHUB_ACTIONS",), "GitHub Actions"),
    (("TF_BUILD",), "Azure DevOps"),
    (("BITBUCKET_BUILD_NUMBER",), "Bitbucket Pipelines"),
    (("CIRCLECI",), "CircleCI"),
    (("TRAVIS",), "Travis CI"),
    (("TEAMCITY_VERSION",), "TeamCity"),
]

# Any of these set means "running in a pipeline"
CI_ENV_VARS: tuple[str, ...] = (
    "CI",
    "JENKINS_HOME",
    "GITLAB_CI",
    "GITHUB_ACTIONS",
    "TF_BUILD",
    "BITBUCKET_BUILD_NUMBER",
    "CIRCLECI",
    "TRAVIS",
    "BUILD_NUMBER",
    "TEAMCITY_VERSION",
)


def _settings(settings: Settings | None) -> Settings:
    return settings if settings is not None else EnvironSettings()


def _forced(settings: Settings) -> bool | None:
    """Return the forced pipeline state, or None when detection is not overridden."""
    if settings.get_bool(FORCE_LOCAL):
        return False
    if settings.get_bool(FORCE_PIPELINE):
        return True
    return None


def is_running_in_pipeline(settings: Settings | None = None) -> bool:
    """
    Detect whether tests run inside a CI/CD pipeline.

    Args:
        settings: Settings to inspect (default: process environment)

    Returns:
        True in a pipeline, False for local execution
    """
    settings = _settings(settings)
    lg = get_library_lg("environment")

    forced = _forced(settings)
    if forced is not None:
        lg.debug("pipeline detection forced", extra={"pipeline": forced})
        return forced

    in_pipeline = any(settings.get(name) for name in CI_ENV_VARS)
    lg.debug("detected execution environment", extra={"pipeline": in_pipeline})
    return in_pipeline


def is_running_locally(settings: Settings | None = None) -> bool:
    return not is_running_in_pipeline(settings)


def detected_ci_system(settings: Settings | None = None) -> str:
    """
    Name the CI system the tests run in.

    Returns:
        "Local (forced)" or "Pipeline (forced)" when overridden, the CI system
        name when recognised, "Unknown CI" for an unrecognised pipeline, and
        "Local" otherwise
    """
    settings = _settings(settings)

    forced = _forced(settings)
    if forced is False:
        return "Local (forced)"
    if forced is True:
        return "Pipeline (forced)"

    for names, system in _CI_SYSTEMS:
        if any(settings.get(name) for name in names):
            return system

    if is_running_in_pipeline(settings):
        return "Unknown CI"
    return "Local"
