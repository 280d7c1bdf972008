"""Shared fixtures: an in-process class-file writer and archive helpers."""

import struct
import zipfile
from pathlib import Path

import pytest


class ClassFileBuilder:
    """Writes just enough of the class-file format to exercise the parser."""

    def __init__(self, name, super_name="java/lang/Object", interfaces=()):
        self.name = name
        self.super_name = super_name
        self.interfaces = list(interfaces)
        self._entries = []
        self._indices = {}
        self._next = 1
        self._fields = []
        self._methods = []
        self._attributes = []

    # ── Constant pool ──────────────────────────────────────

    def _add(self, key, payload, slots=1):
        if key in self._indices:
            return self._indices[key]
        index = self._next
        self._indices[key] = index
        self._entries.append(payload)
        self._next += slots
        return index

    def utf8(self, text):
        raw = text.encode("utf-8")
        return self._add(("utf8", text), bytes([1]) + struct.pack(">H", len(raw)) + raw)

    def klass(self, name):
        return self._add(("class", name), bytes([7]) + struct.pack(">H", self.utf8(name)))

    def name_and_type(self, name, descriptor):
        payload = bytes([12]) + struct.pack(">HH", self.utf8(name), self.utf8(descriptor))
        return self._add(("nat", name, descriptor), payload)

    def method_ref(self, owner, name, descriptor):
        payload = bytes([10]) + struct.pack(">HH", self.klass(owner), self.name_and_type(name, descriptor))
        return self._add(("mref", owner, name, descriptor), payload)

    def long_constant(self, value):
        return self._add(("long", value), bytes([5]) + struct.pack(">q", value), slots=2)

    def string(self, text):
        return self._add(("string", text), bytes([8]) + struct.pack(">H", self.utf8(text)))

    # ── Members and attributes ─────────────────────────────

    def _attribute(self, name, body):
        return struct.pack(">HI", self.utf8(name), len(body)) + body

    def _annotation(self, descriptor, enum_value=None):
        body = struct.pack(">H", self.utf8(descriptor))
        if enum_value is None:
            return body + struct.pack(">H", 0)
        enum_descriptor, constant = enum_value
        body += struct.pack(">H", 1)
        body += struct.pack(">H", self.utf8("value"))
        body += b"e" + struct.pack(">HH", self.utf8(enum_descriptor), self.utf8(constant))
        return body

    def _annotations_attribute(self, annotations):
        body = struct.pack(">H", len(annotations))
        for annotation in annotations:
            if isinstance(annotation, tuple):
                body += self._annotation(*annotation)
            else:
                body += self._annotation(annotation)
        return self._attribute("RuntimeVisibleAnnotations", body)

    def _local_variables(self, attribute, descriptors):
        body = struct.pack(">H", len(descriptors))
        for slot, descriptor in enumerate(descriptors):
            body += struct.pack(">HHHHH", 0, 1, self.utf8(f"v{slot}"), self.utf8(descriptor), slot)
        return self._attribute(attribute, body)

    def _code(self, local_descriptors=(), local_signatures=()):
        attributes = []
        if local_descriptors:
            attributes.append(self._local_variables("LocalVariableTable", local_descriptors))
        if local_signatures:
            attributes.append(self._local_variables("LocalVariableTypeTable", local_signatures))
        code = b"\xb1"  # return
        body = struct.pack(">HHI", 1, max(len(local_descriptors), 1), len(code)) + code
        body += struct.pack(">H", 0)  # exception table
        body += struct.pack(">H", len(attributes)) + b"".join(attributes)
        return self._attribute("Code", body)

    def _member(self, name, descriptor, signature=None, annotations=(),
                local_descriptors=(), local_signatures=(), default_class=None):
        attributes = []
        if signature:
            attributes.append(self._attribute("Signature", struct.pack(">H", self.utf8(signature))))
        if annotations:
            attributes.append(self._annotations_attribute(list(annotations)))
        if local_descriptors or local_signatures:
            attributes.append(self._code(local_descriptors, local_signatures))
        if default_class:
            body = b"c" + struct.pack(">H", self.utf8(default_class))
            attributes.append(self._attribute("AnnotationDefault", body))
        return (
            struct.pack(">HHHH", 0x0001, self.utf8(name), self.utf8(descriptor), len(attributes))
            + b"".join(attributes)
        )

    def field(self, name, descriptor, signature=None, annotations=()):
        self._fields.append(self._member(name, descriptor, signature, annotations))
        return self

    def method(self, name, descriptor, signature=None, annotations=(), **extra):
        self._methods.append(self._member(name, descriptor, signature, annotations, **extra))
        return self

    def type_annotate(self, descriptor, target=0x10, target_info=b"\xff\xff"):
        """Class-level type annotation; defaults to the superclass target."""
        body = struct.pack(">H", 1) + bytes([target]) + target_info + b"\x00"
        body += self._annotation(descriptor)
        self._attributes.append(self._attribute("RuntimeInvisibleTypeAnnotations", body))
        return self

    def signature(self, text):
        self._attributes.append(self._attribute("Signature", struct.pack(">H", self.utf8(text))))
        return self

    def annotate(self, descriptor, enum_value=None):
        annotation = (descriptor, enum_value)
        self._attributes.append(self._annotations_attribute([annotation]))
        return self

    def calls(self, owner, name="run", descriptor="()V"):
        self.method_ref(owner, name, descriptor)
        return self

    def build(self):
        this_index = self.klass(self.name)
        super_index = self.klass(self.super_name) if self.super_name else 0
        interface_indices = [self.klass(i) for i in self.interfaces]
        # Member and attribute bodies have already registered their pool entries
        body = struct.pack(">HHH", 0x0021, this_index, super_index)
        body += struct.pack(">H", len(interface_indices))
        body += b"".join(struct.pack(">H", i) for i in interface_indices)
        body += struct.pack(">H", len(self._fields)) + b"".join(self._fields)
        body += struct.pack(">H", len(self._methods)) + b"".join(self._methods)
        body += struct.pack(">H", len(self._attributes)) + b"".join(self._attributes)
        header = struct.pack(">IHH", 0xCAFEBABE, 0, 52) + struct.pack(">H", self._next)
        return header + b"".join(self._entries) + body


def simple_class(name, *uses):
    """A class whose constant pool calls into each class named in ``uses``."""
    builder = ClassFileBuilder(name)
    for owner in uses:
        builder.calls(owner)
    return builder.build()


def write_jar(path, classes):
    """classes: internal name (``a/b/C``) or raw entry name -> bytes."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as jar:
        jar.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        for name, data in classes.items():
            entry = name if name.endswith(".class") or "." in Path(name).name else f"{name}.class"
            jar.writestr(entry, data)
    return path


def write_classes_dir(path, classes):
    path = Path(path)
    for name, data in classes.items():
        file = path / f"{name}.class"
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_bytes(data)
    return path


@pytest.fixture
def class_builder():
    return ClassFileBuilder


@pytest.fixture
def make_class():
    return simple_class


@pytest.fixture
def make_jar(tmp_path):
    def _make(filename, classes):
        return write_jar(tmp_path / "libs" / filename, classes)
    return _make


@pytest.fixture
def make_classes_dir(tmp_path):
    def _make(dirname, classes):
        return write_classes_dir(tmp_path / dirname, classes)
    return _make
