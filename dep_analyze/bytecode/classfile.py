"""Minimal JVM class-file parser that collects referenced class names."""

from __future__ import annotations

import struct

from dep_analyze.bytecode.signature import (
    SignatureError,
    class_names_in_class_constant,
    class_names_in_signature,
)

MAGIC = 0xCAFEBABE

# Constant pool tags
UTF8 = 1
INTEGER = 3
FLOAT = 4
LONG = 5
DOUBLE = 6
CLASS = 7
STRING = 8
FIELDREF = 9
METHODREF = 10
INTERFACE_METHODREF = 11
NAME_AND_TYPE = 12
METHOD_HANDLE = 15
METHOD_TYPE = 16
DYNAMIC = 17
INVOKE_DYNAMIC = 18
MODULE = 19
PACKAGE = 20

# Payload size of fixed-width entries
_FIXED_SIZES = {
    INTEGER: 4, FLOAT: 4, LONG: 8, DOUBLE: 8,
    CLASS: 2, STRING: 2, FIELDREF: 4, METHODREF: 4, INTERFACE_METHODREF: 4,
    NAME_AND_TYPE: 4, METHOD_HANDLE: 3, METHOD_TYPE: 2, DYNAMIC: 4,
    INVOKE_DYNAMIC: 4, MODULE: 2, PACKAGE: 2,
}

_ANNOTATION_ATTRIBUTES = frozenset({
    "RuntimeVisibleAnnotations", "RuntimeInvisibleAnnotations",
})
_PARAMETER_ANNOTATION_ATTRIBUTES = frozenset({
    "RuntimeVisibleParameterAnnotations", "RuntimeInvisibleParameterAnnotations",
})
_TYPE_ANNOTATION_ATTRIBUTES = frozenset({
    "RuntimeVisibleTypeAnnotations", "RuntimeInvisibleTypeAnnotations",
})
_LOCAL_VARIABLE_ATTRIBUTES = frozenset({
    "LocalVariableTable", "LocalVariableTypeTable",
})

# target_info size per type annotation target_type (localvar targets vary)
_TYPE_TARGET_SIZES = {
    0x00: 1, 0x01: 1, 0x10: 2, 0x11: 2, 0x12: 2, 0x13: 0, 0x14: 0, 0x15: 0,
    0x16: 1, 0x17: 2, 0x42: 2, 0x43: 2, 0x44: 2, 0x45: 2, 0x46: 2,
    0x47: 3, 0x48: 3, 0x49: 3, 0x4A: 3, 0x4B: 3,
}


class ClassFormatError(ValueError):
    pass


def decode_modified_utf8(raw: bytes) -> str:
    """Decode the JVM's modified UTF-8 (two-byte NUL, CESU-style surrogates)."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    try:
        # Re-pair surrogates into real code points
        return text.encode("utf-16", errors="surrogatepass").decode("utf-16")
    except UnicodeDecodeError as e:
        raise ClassFormatError(f"invalid modified UTF-8 string: {e}") from e


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def take(self, size: int) -> bytes:
        end = self.pos + size
        if end > len(self.data):
            raise ClassFormatError(f"truncated class file at offset {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def u1(self) -> int:
        return self.take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self.take(4))[0]


class ClassFile:
    """Parsed view of one class file: its name and the classes it references."""

    def __init__(self, data: bytes):
        self._reader = _Reader(data)
        self._utf8: dict[int, str] = {}
        self._class_refs: dict[int, int] = {}
        self._descriptor_refs: list[int] = []
        self._internal_names: dict[str, None] = {}
        self.name = ""
        self._parse()

    @property
    def referenced_classes(self) -> list[str]:
        """Dotted names, first-seen order, including this class itself."""
        return [n.replace("/", ".") for n in self._internal_names]

    # ── Parsing ─────────────────────────────────────────────

    def _parse(self) -> None:
        r = self._reader
        if r.u4() != MAGIC:
            raise ClassFormatError("bad magic number")
        r.u2()  # minor
        r.u2()  # major
        self._read_constant_pool()

        r.u2()  # access flags
        self.name = self._class_name(r.u2()).replace("/", ".")
        super_index = r.u2()
        if super_index:
            self._class_name(super_index)
        for _ in range(r.u2()):
            self._class_name(r.u2())

        for _ in range(r.u2()):
            self._read_member()
        for _ in range(r.u2()):
            self._read_member()
        self._read_attributes()

        for index in self._class_refs.values():
            try:
                names = class_names_in_class_constant(self._utf8_at(index))
            except SignatureError as e:
                raise ClassFormatError(str(e)) from e
            for name in names:
                self._add(name)
        for index in self._descriptor_refs:
            self._add_signature(self._utf8_at(index))

    def _read_constant_pool(self) -> None:
        r = self._reader
        count = r.u2()
        index = 1
        while index < count:
            tag = r.u1()
            if tag == UTF8:
                self._utf8[index] = decode_modified_utf8(r.take(r.u2()))
            elif tag == CLASS:
                self._class_refs[index] = r.u2()
            elif tag == NAME_AND_TYPE:
                r.u2()
                self._descriptor_refs.append(r.u2())
            elif tag == METHOD_TYPE:
                self._descriptor_refs.append(r.u2())
            elif tag in _FIXED_SIZES:
                r.take(_FIXED_SIZES[tag])
            else:
                raise ClassFormatError(f"unknown constant pool tag {tag} at index {index}")
            # Long and double entries occupy two slots
            index += 2 if tag in (LONG, DOUBLE) else 1

    def _read_member(self) -> None:
        r = self._reader
        r.u2()  # access flags
        self._utf8_at(r.u2())
        self._descriptor_refs.append(r.u2())
        self._read_attributes()

    def _read_attributes(self, r: _Reader | None = None) -> None:
        r = r or self._reader
        for _ in range(r.u2()):
            name = self._utf8_at(r.u2())
            body = _Reader(r.take(r.u4()))
            if name == "Signature":
                self._descriptor_refs.append(body.u2())
            elif name in _ANNOTATION_ATTRIBUTES:
                self._read_annotations(body)
            elif name in _PARAMETER_ANNOTATION_ATTRIBUTES:
                for _ in range(body.u1()):
                    self._read_annotations(body)
            elif name in _TYPE_ANNOTATION_ATTRIBUTES:
                for _ in range(body.u2()):
                    self._read_type_annotation(body)
            elif name == "AnnotationDefault":
                self._read_element_value(body)
            elif name in _LOCAL_VARIABLE_ATTRIBUTES:
                for _ in range(body.u2()):
                    body.take(6)  # start_pc, length, name_index
                    self._descriptor_refs.append(body.u2())
                    body.u2()  # slot
            elif name == "Code":
                self._read_code(body)

    def _read_code(self, body: _Reader) -> None:
        body.take(4)  # max_stack, max_locals
        body.take(body.u4())
        # Catch types are CONSTANT_Class entries and already collected
        body.take(8 * body.u2())
        self._read_attributes(body)

    def _read_type_annotation(self, body: _Reader) -> None:
        target = body.u1()
        if target in _TYPE_TARGET_SIZES:
            body.take(_TYPE_TARGET_SIZES[target])
        elif target in (0x40, 0x41):
            body.take(6 * body.u2())  # localvar_target table
        else:
            raise ClassFormatError(f"unknown type annotation target 0x{target:02x}")
        body.take(2 * body.u1())  # type_path
        self._read_annotation(body)

    def _read_annotations(self, body: _Reader) -> None:
        for _ in range(body.u2()):
            self._read_annotation(body)

    def _read_annotation(self, body: _Reader) -> None:
        self._descriptor_refs.append(body.u2())
        for _ in range(body.u2()):
            body.u2()  # element name
            self._read_element_value(body)

    def _read_element_value(self, body: _Reader) -> None:
        tag = chr(body.u1())
        if tag in "BCDFIJSZs":
            body.u2()
        elif tag == "e":
            self._descriptor_refs.append(body.u2())
            body.u2()
        elif tag == "c":
            self._descriptor_refs.append(body.u2())
        elif tag == "@":
            self._read_annotation(body)
        elif tag == "[":
            for _ in range(body.u2()):
                self._read_element_value(body)
        else:
            raise ClassFormatError(f"unknown annotation element tag {tag!r}")

    # ── Constant pool lookups ───────────────────────────────

    def _utf8_at(self, index: int) -> str:
        try:
            return self._utf8[index]
        except KeyError:
            raise ClassFormatError(f"constant pool index {index} is not a UTF-8 entry") from None

    def _class_name(self, index: int) -> str:
        try:
            return self._utf8_at(self._class_refs[index])
        except KeyError:
            raise ClassFormatError(f"constant pool index {index} is not a class entry") from None

    def _add(self, internal_name: str) -> None:
        self._internal_names.setdefault(internal_name, None)

    def _add_signature(self, text: str) -> None:
        try:
            names = class_names_in_signature(text)
        except SignatureError as e:
            raise ClassFormatError(str(e)) from e
        for name in names:
            self._add(name)


def parse_class(data: bytes) -> ClassFile:
    return ClassFile(data)
