"""Map repository URLs to raw project.janet URLs on their hosting provider."""

from __future__ import annotations

from pkgdir.errors import UnsupportedHost

DESCRIPTOR_FILENAME = "project.janet"

SOURCEHUT_PREFIX = "https://git.sr.ht/"
GITHUB_PREFIX = "https://github.com/"
GITLAB_PREFIX = "https://gitlab.com/"

GITHUB_RAW_HOST = "https://raw.githubusercontent.com/"

SOURCEHUT_SUFFIX = f"/blob/master/{DESCRIPTOR_FILENAME}"
GITLAB_SUFFIX = f"/-/raw/master/{DESCRIPTOR_FILENAME}"


def resolve(repository_url: str, package: str | None = None) -> str:
    """Return the raw descriptor URL for a repository.

    Raises UnsupportedHost when the repository is not on sourcehut, github
    or gitlab. ``package`` is only used for the error message.
    """
    if repository_url.startswith(SOURCEHUT_PREFIX):
        return repository_url + SOURCEHUT_SUFFIX
    if repository_url.startswith(GITHUB_PREFIX):
        # owner/repo without the scheme/host and the trailing .git
        path = repository_url[len(GITHUB_PREFIX):-4]
        return f"{GITHUB_RAW_HOST}{path}/master/{DESCRIPTOR_FILENAME}"
    if repository_url.startswith(GITLAB_PREFIX):
        return repository_url[:-4] + GITLAB_SUFFIX
    raise UnsupportedHost(package, repository_url)


def provider_name(repository_url: str) -> str | None:
    """Return "sourcehut", "github", "gitlab", or None for other hosts."""
    for name, prefix in (
        ("sourcehut", SOURCEHUT_PREFIX),
        ("github", GITHUB_PREFIX),
        ("gitlab", GITLAB_PREFIX),
    ):
        if repository_url.startswith(prefix):
            return name
    return None
