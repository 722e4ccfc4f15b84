"""Exceptions raised by pkgdir."""

from __future__ import annotations


class PkgdirError(Exception):
    """Base class for all pkgdir failures."""


class ConfigError(PkgdirError):
    """Raised when configuration values are invalid."""


class FetchError(PkgdirError):
    """Raised when a remote file cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class UnsupportedHost(PkgdirError):
    """Raised when a repository is not hosted on a known provider."""

    def __init__(self, package: str | None, repository_url: str) -> None:
        label = package or "<unknown>"
        super().__init__(
            f"Unsupported repository host for {label}: {repository_url}"
        )
        self.package = package
        self.repository_url = repository_url


class ReadError(PkgdirError):
    """Raised when Janet source text cannot be parsed."""

    def __init__(self, message: str, line: int) -> None:
        super().__init__(f"line {line}: {message}")
        self.line = line


class EvaluationError(PkgdirError):
    """Raised when a form uses something the evaluator does not support."""


class MalformedDescriptor(PkgdirError):
    """Raised when a project.janet file has no usable declare-project form."""


class MalformedPackageList(PkgdirError):
    """Raised when pkgs.janet does not yield a package mapping."""
