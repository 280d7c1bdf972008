"""Walks archives and class directories and applies the class-file parser."""

from __future__ import annotations

import logging
import re
import zipfile
import zlib
from pathlib import Path
from typing import Iterator

from dep_analyze.bytecode.classfile import ClassFormatError, parse_class
from dep_analyze.errors import ParseError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s")
_MULTI_RELEASE_PREFIX = re.compile(r"^META-INF/versions/\d+/")
_NON_CLASS_NAMES = {"module-info", "package-info"}

# Failures ZipFile.read raises for damaged or unsupported entries
_ARCHIVE_READ_ERRORS = (
    zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError, OSError,
)


def _is_valid_name(name: str) -> bool:
    return bool(name) and not _WHITESPACE.search(name)


def class_name_from_path(relative: str) -> str | None:
    """Map ``a/b/C$D.class`` to ``a.b.C$D``; None for non-class entries."""
    if not relative.endswith(".class"):
        return None
    relative = _MULTI_RELEASE_PREFIX.sub("", relative)
    stem = relative[: -len(".class")]
    if stem.rsplit("/", 1)[-1] in _NON_CLASS_NAMES:
        return None
    return stem.replace("/", ".")


class ClassReferenceExtractor:
    """Reads compiled classes from a jar, a class directory or a single class file.

    ``referenced_classes`` parses bytecode and returns every class the code
    refers to. ``defined_classes`` lists the classes the location provides.
    Both raise ``ParseError`` on unreadable or corrupt input.
    """

    def referenced_classes(self, path: Path) -> frozenset[str]:
        names: dict[str, None] = {}
        for entry, data in self._class_files(Path(path)):
            try:
                parsed = parse_class(data)
            except ClassFormatError as e:
                raise ParseError(path, str(e), entry=entry) from e
            for name in parsed.referenced_classes:
                if _is_valid_name(name):
                    names.setdefault(name, None)
        logger.debug("%s references %d classes", path, len(names))
        return frozenset(names)

    def defined_classes(self, path: Path) -> frozenset[str]:
        path = Path(path)
        names = [
            name for name in map(class_name_from_path, self._entry_names(path))
            if name is not None and _is_valid_name(name)
        ]
        logger.debug("%s defines %d classes", path, len(names))
        return frozenset(names)

    # ── Walking ─────────────────────────────────────────────

    def _entry_names(self, path: Path) -> list[str]:
        if path.is_dir():
            return [p.relative_to(path).as_posix() for p in sorted(path.rglob("*.class")) if p.is_file()]
        if path.suffix == ".class" and path.is_file():
            return [path.name]
        with self._open_archive(path) as archive:
            return [info.filename for info in archive.infolist() if not info.is_dir()]

    def _class_files(self, path: Path) -> Iterator[tuple[str, bytes]]:
        if path.is_dir():
            for file in sorted(path.rglob("*.class")):
                relative = file.relative_to(path).as_posix()
                if file.is_file() and class_name_from_path(relative) is not None:
                    yield relative, self._read_bytes(file)
            return
        if path.suffix == ".class" and path.is_file():
            if class_name_from_path(path.name) is not None:
                yield path.name, self._read_bytes(path)
            return
        with self._open_archive(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or class_name_from_path(info.filename) is None:
                    continue
                try:
                    data = archive.read(info)
                except _ARCHIVE_READ_ERRORS as e:
                    raise ParseError(path, str(e), entry=info.filename) from e
                yield info.filename, data

    @staticmethod
    def _read_bytes(file: Path) -> bytes:
        try:
            return file.read_bytes()
        except OSError as e:
            raise ParseError(file, str(e)) from e

    @staticmethod
    def _open_archive(path: Path) -> zipfile.ZipFile:
        if not path.exists():
            raise ParseError(path, "no such file or directory")
        try:
            return zipfile.ZipFile(path)
        except (zipfile.BadZipFile, OSError) as e:
            raise ParseError(path, f"not a readable archive ({e})") from e
