"""pkgdir: render an HTML directory of Janet packages."""

__version__ = "0.1.0"
