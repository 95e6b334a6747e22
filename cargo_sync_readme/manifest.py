"""Cargo manifest discovery and interpretation."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .exceptions import ManifestError

MANIFEST_NAME = "Cargo.toml"
DEFAULT_README = "README.md"
DEFAULT_LIB_PATH = Path("src") / "lib.rs"
DEFAULT_BIN_PATH = Path("src") / "main.rs"

CANNOT_FIND_ENTRY_POINT = """\
Cannot find entry point (default to src/lib.rs or src/main.rs). This is likely to be due to a
special configuration in your Cargo.toml manifest file or you're just missing the entry point
files."""

AMBIGUOUS_ENTRY_POINT = """\
Your crate defines both a binary and a library. Use the -f option (`--prefer-doc-from bin` or
`--prefer-doc-from lib`) to tell sync-readme which file it should read the documentation from."""


class PreferDocFrom(Enum):
    """Which crate target the documentation is read from."""

    BINARY = "bin"
    LIBRARY = "lib"


@dataclass
class Manifest:
    """A parsed ``Cargo.toml``.

    Attributes:
        path: Absolute path of the manifest file.
        data: Decoded TOML document.
    """

    path: Path
    data: dict

    @property
    def parent_dir(self) -> Path:
        return self.path.parent

    @classmethod
    def load(cls, path: Path) -> Manifest:
        """Read and decode a manifest file.

        Raises:
            ManifestError: If the file cannot be read or is not valid TOML.
        """
        try:
            with open(path, "rb") as stream:
                data = tomllib.load(stream)
        except OSError as error:
            raise ManifestError(f"Cannot read {path}: {error}") from error
        except tomllib.TOMLDecodeError as error:
            raise ManifestError(f"Invalid TOML in {path}: {error}") from error
        return cls(path=path.resolve(), data=data)

    @classmethod
    def find(cls, search_path: Path) -> Manifest:
        """Find the nearest ``Cargo.toml`` from `search_path` upwards.

        Args:
            search_path: Directory where the lookup starts.

        Returns:
            Manifest: The first manifest found walking towards the root.

        Raises:
            ManifestError: If no manifest exists in `search_path` or any parent,
                or the one found cannot be decoded.

        Examples:
            manifest = Manifest.find(Path.cwd())
        """
        current = search_path.resolve()

        while True:
            candidate = current / MANIFEST_NAME
            if candidate.is_file():
                return cls.load(candidate)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise ManifestError(f"No {MANIFEST_NAME} found in {search_path} or any parent directory")

    def _package(self) -> dict:
        package = self.data.get("package")
        if not isinstance(package, dict):
            raise ManifestError(f"Missing [package] table in {self.path}")
        return package

    def crate_name(self) -> str:
        name = self._package().get("name")
        if not isinstance(name, str) or not name:
            raise ManifestError(f"Failed to get the name of the crate from {self.path}")
        return name

    def readme(self) -> Path:
        """Resolve the README path declared by ``package.readme``.

        Cargo's ``readme = true`` and an absent key both mean ``README.md``
        next to the manifest.

        Raises:
            ManifestError: If the README is disabled or declared with a
                non-string value.
        """
        readme = self._package().get("readme", True)
        if readme is True:
            readme = DEFAULT_README
        elif readme is False:
            raise ManifestError(f"The README is disabled (`readme = false`) in {self.path}")
        elif not isinstance(readme, str) or not readme:
            raise ManifestError(f"Invalid `package.readme` value in {self.path}")
        return self.parent_dir / readme

    def library_entry_point(self) -> Path | None:
        lib = self.data.get("lib")
        if isinstance(lib, dict) and isinstance(lib.get("path"), str):
            path = self.parent_dir / lib["path"]
        else:
            path = self.parent_dir / DEFAULT_LIB_PATH
        return path if path.is_file() else None

    def binary_entry_point(self) -> Path | None:
        bins = self.data.get("bin")
        if isinstance(bins, list):
            for target in bins:
                if isinstance(target, dict) and isinstance(target.get("path"), str):
                    path = self.parent_dir / target["path"]
                    if path.is_file():
                        return path
        path = self.parent_dir / DEFAULT_BIN_PATH
        return path if path.is_file() else None

    def entry_point(self, prefer_doc_from: PreferDocFrom | None = None) -> Path:
        """Select the file whose inner documentation is synchronized.

        Args:
            prefer_doc_from: Force the library or the binary target. Without
                it, the only existing target is used.

        Returns:
            Path: Path of ``lib.rs``, ``main.rs`` or their configured
                replacements.

        Raises:
            ManifestError: If the selected target does not exist, no target
                exists, or both exist and no preference was given.
        """
        if prefer_doc_from is PreferDocFrom.LIBRARY:
            entry_point = self.library_entry_point()
        elif prefer_doc_from is PreferDocFrom.BINARY:
            entry_point = self.binary_entry_point()
        else:
            library = self.library_entry_point()
            binary = self.binary_entry_point()
            if library is not None and binary is not None:
                raise ManifestError(AMBIGUOUS_ENTRY_POINT)
            entry_point = library or binary

        if entry_point is None:
            raise ManifestError(CANNOT_FIND_ENTRY_POINT)
        return entry_point
