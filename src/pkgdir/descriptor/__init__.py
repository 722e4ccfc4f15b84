"""Reading and interpreting Janet package files."""

from pkgdir.descriptor.metadata import PackageMetadata, PackageRef, parse_descriptor
from pkgdir.descriptor.reader import Compound, Keyword, Symbol, read_forms

__all__ = [
    "Compound",
    "Keyword",
    "PackageMetadata",
    "PackageRef",
    "Symbol",
    "parse_descriptor",
    "read_forms",
]
