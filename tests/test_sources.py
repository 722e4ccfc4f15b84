"""Tests for repository URL resolution."""

import pytest

from pkgdir.errors import UnsupportedHost
from pkgdir.sources import provider_name, resolve


class TestResolve:
    def test_sourcehut_appends_suffix(self) -> None:
        url = "https://git.sr.ht/~bakpakin/temple"
        assert resolve(url) == url + "/blob/master/project.janet"

    def test_sourcehut_keeps_git_suffix(self) -> None:
        url = "https://git.sr.ht/~user/repo.git"
        assert resolve(url) == "https://git.sr.ht/~user/repo.git/blob/master/project.janet"

    def test_github(self) -> None:
        assert resolve("https://github.com/janet-lang/spork.git") == (
            "https://raw.githubusercontent.com/janet-lang/spork/master/project.janet"
        )

    @pytest.mark.parametrize("owner,repo", [
        ("a", "b"),
        ("pyrmont", "testament"),
        ("some-org", "repo.with.dots"),
    ])
    def test_github_owner_repo(self, owner: str, repo: str) -> None:
        assert resolve(f"https://github.com/{owner}/{repo}.git") == (
            f"https://raw.githubusercontent.com/{owner}/{repo}/master/project.janet"
        )

    def test_github_slices_blindly(self) -> None:
        # The last four characters are dropped whether or not they are ".git".
        assert resolve("https://github.com/owner/repository") == (
            "https://raw.githubusercontent.com/owner/reposi/master/project.janet"
        )

    def test_gitlab(self) -> None:
        assert resolve("https://gitlab.com/group/project.git") == (
            "https://gitlab.com/group/project/-/raw/master/project.janet"
        )

    def test_unsupported_host(self) -> None:
        with pytest.raises(UnsupportedHost) as exc_info:
            resolve("https://example.com/foo.git", package="foo")
        assert exc_info.value.package == "foo"
        assert exc_info.value.repository_url == "https://example.com/foo.git"
        assert "foo" in str(exc_info.value)

    def test_http_github_is_unsupported(self) -> None:
        with pytest.raises(UnsupportedHost):
            resolve("http://github.com/a/b.git")


class TestProviderName:
    def test_known_hosts(self) -> None:
        assert provider_name("https://git.sr.ht/~a/b") == "sourcehut"
        assert provider_name("https://github.com/a/b.git") == "github"
        assert provider_name("https://gitlab.com/a/b.git") == "gitlab"

    def test_unknown_host(self) -> None:
        assert provider_name("https://codeberg.org/a/b.git") is None
