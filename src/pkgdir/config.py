"""Global configuration for pkgdir."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from pkgdir.errors import ConfigError

LISTING_URL = "https://raw.githubusercontent.com/janet-lang/pkgs/master/pkgs.janet"
LISTING_FILENAME = "pkgs.janet"
CACHE_DIRNAME = ".pkgdir-cache"

ON_UNSUPPORTED_CHOICES = ("abort", "skip")


def _default_base_dir() -> Path:
    return Path(os.environ.get("PKGDIR_HOME", Path.cwd()))


@dataclass
class PkgdirConfig:
    base_dir: Path = field(default_factory=_default_base_dir)
    listing_url: str = LISTING_URL
    timeout: float = 30.0

    # What to do with packages hosted outside sourcehut/github/gitlab
    on_unsupported: str = "abort"

    def __post_init__(self) -> None:
        self.base_dir = Path(self.base_dir)
        if self.on_unsupported not in ON_UNSUPPORTED_CHOICES:
            raise ConfigError(
                f"on_unsupported must be one of {', '.join(ON_UNSUPPORTED_CHOICES)}, "
                f"got {self.on_unsupported!r}"
            )
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @property
    def cache_dir(self) -> Path:
        return self.base_dir / CACHE_DIRNAME

    @property
    def listing_path(self) -> Path:
        return self.base_dir / LISTING_FILENAME

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_env(cls) -> PkgdirConfig:
        """Load config from environment variables."""
        kwargs: dict[str, object] = {}
        if url := os.environ.get("PKGDIR_LISTING_URL"):
            kwargs["listing_url"] = url
        if timeout := os.environ.get("PKGDIR_TIMEOUT"):
            try:
                kwargs["timeout"] = float(timeout)
            except ValueError:
                raise ConfigError(f"PKGDIR_TIMEOUT is not a number: {timeout!r}") from None
        if policy := os.environ.get("PKGDIR_ON_UNSUPPORTED"):
            kwargs["on_unsupported"] = policy.lower()
        return cls(**kwargs)  # type: ignore[arg-type]
