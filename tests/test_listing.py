"""Tests for loading pkgs.janet."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgdir.config import LISTING_URL
from pkgdir.errors import MalformedPackageList
from pkgdir.listing import PackageListLoader, parse_package_list

from conftest import FakeFetcher

PKGS_JANET = """\
# Package index
(defn- gh [repo] (string "https://github.com/" repo ".git"))

(def- sourcehut "https://git.sr.ht/")

(def packages
  (let [github "https://github.com/"]
    {:spork (string github "janet-lang/spork.git")
     'temple (string sourcehut "~bakpakin/temple")
     "jaylib" "https://github.com/janet-lang/jaylib.git"}))

(defn- unsupported-by-pkgdir [] (os/exit 1))
"""


class TestParsePackageList:
    def test_sorted_by_name(self) -> None:
        text = "(def a 1)\n(def b 2)\n{'baz \"url3\" 'apple \"url1\" 'mango \"url2\"}"
        refs = parse_package_list(text)
        assert [r.name for r in refs] == ["apple", "baz", "mango"]
        assert [r.repository_url for r in refs] == ["url1", "url3", "url2"]

    def test_computed_table(self) -> None:
        refs = parse_package_list(PKGS_JANET)
        assert [(r.name, r.repository_url) for r in refs] == [
            ("jaylib", "https://github.com/janet-lang/jaylib.git"),
            ("spork", "https://github.com/janet-lang/spork.git"),
            ("temple", "https://git.sr.ht/~bakpakin/temple"),
        ]

    def test_names_are_plain_strings(self) -> None:
        refs = parse_package_list(PKGS_JANET)
        assert all(type(r.name) is str for r in refs)

    def test_ordinary_string_ordering(self) -> None:
        text = '(def a 1) (def b 2) {:b "2" :B "3" :a "1"}'
        assert [r.name for r in parse_package_list(text)] == ["B", "a", "b"]

    def test_too_few_forms(self) -> None:
        with pytest.raises(MalformedPackageList, match="expected at least 3"):
            parse_package_list('(def a 1) {:x "y"}')

    def test_third_form_not_a_mapping(self) -> None:
        with pytest.raises(MalformedPackageList, match="not a mapping"):
            parse_package_list('(def a 1) (def b 2) (def c ["x"])')

    def test_non_string_url(self) -> None:
        with pytest.raises(MalformedPackageList, match="Bad package entry"):
            parse_package_list('(def a 1) (def b 2) {:x 3}')

    def test_unreadable(self) -> None:
        with pytest.raises(MalformedPackageList):
            parse_package_list('(def a 1) (def b 2) {:x "y"')

    def test_exponent_like_symbol_names(self) -> None:
        refs = parse_package_list('(def e1 1) (def b 2) {:x "y"}')
        assert [(r.name, r.repository_url) for r in refs] == [("x", "y")]

    def test_colliding_names_rejected(self) -> None:
        with pytest.raises(MalformedPackageList, match="collide"):
            parse_package_list('(def a 1) (def b 2) {:spork "u1" "spork" "u2"}')

    def test_arbitrary_code_rejected(self) -> None:
        with pytest.raises(MalformedPackageList):
            parse_package_list('(def a 1) (os/shell "rm -rf ~") {:x "y"}')


class TestPackageListLoader:
    def test_downloads_when_absent(self, tmp_path: Path) -> None:
        fetcher = FakeFetcher({LISTING_URL: PKGS_JANET.encode()})
        listing = tmp_path / "pkgs.janet"

        refs = PackageListLoader(listing, fetcher).load_packages()

        assert fetcher.calls == [LISTING_URL]
        assert listing.read_text() == PKGS_JANET
        assert len(refs) == 3

    def test_uses_existing_copy(self, tmp_path: Path) -> None:
        listing = tmp_path / "pkgs.janet"
        listing.write_text(PKGS_JANET)
        fetcher = FakeFetcher()

        refs = PackageListLoader(listing, fetcher).load_packages()

        assert fetcher.calls == []
        assert [r.name for r in refs] == ["jaylib", "spork", "temple"]

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        listing = tmp_path / "pkgs.janet"
        listing.write_bytes(b'(def a 1) (def b 2) {:x "\xff"}')
        with pytest.raises(MalformedPackageList, match="UTF-8"):
            PackageListLoader(listing, FakeFetcher()).load_packages()

    def test_custom_url(self, tmp_path: Path) -> None:
        url = "https://mirror.example/pkgs.janet"
        fetcher = FakeFetcher({url: PKGS_JANET.encode()})
        PackageListLoader(tmp_path / "pkgs.janet", fetcher, url=url).load_packages()
        assert fetcher.calls == [url]
