"""Reader for JVM field/method descriptors and generic signatures."""

from __future__ import annotations

_PRIMITIVES = frozenset("BCDFIJSZV")


class SignatureError(ValueError):
    pass


class _SignatureReader:
    """Collects every class name mentioned in a descriptor or signature.

    Handles the full generic signature grammar: formal type parameters,
    type arguments with wildcards, inner class suffixes and throws clauses.
    Plain descriptors are a subset of that grammar.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.names: list[str] = []

    def read(self) -> list[str]:
        if self._peek() == "<":
            self._formal_type_parameters()
        while self.pos < len(self.text):
            if self._peek() in "()^":
                self.pos += 1
                continue
            self._type()
        return self.names

    def _peek(self) -> str:
        if self.pos >= len(self.text):
            raise SignatureError(f"unexpected end of signature {self.text!r}")
        return self.text[self.pos]

    def _formal_type_parameters(self) -> None:
        self.pos += 1  # '<'
        while self._peek() != ">":
            end = self.text.find(":", self.pos)
            if end < 0:
                raise SignatureError(f"missing bound in {self.text!r}")
            self.pos = end
            while self._peek() == ":":
                self.pos += 1
                if self._peek() in "L[T":
                    self._type()
        self.pos += 1

    def _type(self) -> None:
        ch = self._peek()
        if ch in _PRIMITIVES:
            self.pos += 1
        elif ch == "[":
            self.pos += 1
            self._type()
        elif ch == "T":
            end = self.text.find(";", self.pos)
            if end < 0:
                raise SignatureError(f"unterminated type variable in {self.text!r}")
            self.pos = end + 1
        elif ch == "L":
            self.pos += 1
            self._class_type()
        else:
            raise SignatureError(f"unexpected {ch!r} at {self.pos} in {self.text!r}")

    def _identifier(self) -> str:
        start = self.pos
        while self._peek() not in ";<.":
            self.pos += 1
        if start == self.pos:
            raise SignatureError(f"empty class name in {self.text!r}")
        return self.text[start:self.pos]

    def _class_type(self) -> None:
        name = self._identifier()
        self.names.append(name)
        while True:
            ch = self._peek()
            if ch == "<":
                self._type_arguments()
            elif ch == ".":
                self.pos += 1
                name = f"{name}${self._identifier()}"
                self.names.append(name)
            elif ch == ";":
                self.pos += 1
                return
            else:
                raise SignatureError(f"unexpected {ch!r} in {self.text!r}")

    def _type_arguments(self) -> None:
        self.pos += 1  # '<'
        while self._peek() != ">":
            ch = self._peek()
            if ch == "*":
                self.pos += 1
                continue
            if ch in "+-":
                self.pos += 1
            self._type()
        self.pos += 1


def class_names_in_signature(text: str) -> list[str]:
    """Return internal (slash-separated) class names used by a signature."""
    return _SignatureReader(text).read()


def class_names_in_class_constant(name: str) -> list[str]:
    """CONSTANT_Class names are internal names, or descriptors for arrays."""
    if name.startswith("["):
        return class_names_in_signature(name)
    return [name]
