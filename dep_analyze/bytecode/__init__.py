"""Bytecode reading: class-file parsing and archive walking."""

from __future__ import annotations

from dep_analyze.bytecode.classfile import ClassFile, ClassFormatError, parse_class
from dep_analyze.bytecode.extractor import ClassReferenceExtractor, class_name_from_path
from dep_analyze.bytecode.signature import class_names_in_signature

__all__ = [
    "ClassFile",
    "ClassFormatError",
    "ClassReferenceExtractor",
    "class_name_from_path",
    "class_names_in_signature",
    "parse_class",
]
