"""Vertex buffer layouts and the attribute pointers they describe."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class GLType(IntEnum):
    BYTE = 0x1400
    UNSIGNED_BYTE = 0x1401
    SHORT = 0x1402
    UNSIGNED_SHORT = 0x1403
    INT = 0x1404
    UNSIGNED_INT = 0x1405
    FLOAT = 0x1406
    DOUBLE = 0x140A


_SIZES = {
    GLType.BYTE: 1,
    GLType.UNSIGNED_BYTE: 1,
    GLType.SHORT: 2,
    GLType.UNSIGNED_SHORT: 2,
    GLType.INT: 4,
    GLType.UNSIGNED_INT: 4,
    GLType.FLOAT: 4,
    GLType.DOUBLE: 8,
}


def size_of_gl_type(gl_type: int) -> int:
    """Size in bytes of one value of a GL data type."""
    try:
        return _SIZES[GLType(gl_type)]
    except ValueError:
        raise ValueError(f"type {gl_type!r} not supported") from None


class _Layout:
    Element: type

    def __init__(self, elements=()) -> None:
        self._elements: list = []
        for element in elements:
            self.push(element)

    def _coerce(self, element):
        return element if isinstance(element, self.Element) else self.Element(*element)

    @property
    def elements(self) -> tuple:
        return tuple(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self):
        return iter(self._elements)


class InterleavedVertexBufferLayout(_Layout):
    """Attributes packed one after another within each vertex."""

    @dataclass(frozen=True)
    class Element:
        count: int
        type: int

    def __init__(self, elements=()) -> None:
        self._stride = 0
        super().__init__(elements)

    @property
    def stride(self) -> int:
        return self._stride

    def push(self, element) -> None:
        element = self._coerce(element)
        size = element.count * size_of_gl_type(element.type)
        self._elements.append(element)
        self._stride += size


class VertexBufferLayout(_Layout):
    """Attributes stored in separate blocks at given byte offsets."""

    @dataclass(frozen=True)
    class Element:
        count: int
        type: int
        offset: int

    def push(self, element) -> None:
        self._elements.append(self._coerce(element))


class InstancingVertexBufferLayout(_Layout):
    """Separate attribute blocks advanced per instance by a divisor."""

    @dataclass(frozen=True)
    class Element:
        count: int
        type: int
        offset: int
        divisor: int

    def push(self, element) -> None:
        self._elements.append(self._coerce(element))


class InterleavedInstancingVertexBufferLayout(_Layout):
    """Interleaved attributes advanced per instance by a divisor."""

    @dataclass(frozen=True)
    class Element:
        count: int
        type: int
        divisor: int

    def __init__(self, elements=()) -> None:
        self._stride = 0
        super().__init__(elements)

    @property
    def stride(self) -> int:
        return self._stride

    def push(self, element) -> None:
        element = self._coerce(element)
        size = element.count * size_of_gl_type(element.type)
        self._elements.append(element)
        self._stride += size


Layout = Union[
    InterleavedVertexBufferLayout,
    VertexBufferLayout,
    InstancingVertexBufferLayout,
    InterleavedInstancingVertexBufferLayout,
]


@dataclass(frozen=True)
class AttributePointer:
    """One vertex attribute as it is bound to a vertex array."""

    index: int
    count: int
    type: GLType
    stride: int
    offset: int
    divisor: int | None = None
    normalized: bool = False


def attribute_pointers(layout: Layout, first_index: int = 0) -> list[AttributePointer]:
    """Attribute pointers for a layout, numbered from ``first_index``."""
    pointers = []
    if isinstance(layout, (InterleavedVertexBufferLayout, InterleavedInstancingVertexBufferLayout)):
        offset = 0
        for index, element in enumerate(layout.elements, first_index):
            pointers.append(
                AttributePointer(
                    index=index,
                    count=element.count,
                    type=GLType(element.type),
                    stride=layout.stride,
                    offset=offset,
                    divisor=getattr(element, "divisor", None),
                )
            )
            offset += element.count * size_of_gl_type(element.type)
    elif isinstance(layout, (VertexBufferLayout, InstancingVertexBufferLayout)):
        for index, element in enumerate(layout.elements, first_index):
            pointers.append(
                AttributePointer(
                    index=index,
                    count=element.count,
                    type=GLType(element.type),
                    stride=element.count * size_of_gl_type(element.type),
                    offset=element.offset,
                    divisor=getattr(element, "divisor", None),
                )
            )
    else:
        raise TypeError(f"unsupported layout {type(layout).__name__}")
    return pointers