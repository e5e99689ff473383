"""Glyph atlas packing and text layout for bitmap-font rendering."""

from __future__ import annotations

import math
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

DEFAULT_ATLAS_SIZE = 2048

GlyphBounds = Sequence[float]  # (x_min, x_max, y_min, y_max) in font units


def char_range(first, last) -> list:
    """Characters (or code points) from ``first`` up to, but not including, ``last``."""
    if isinstance(first, str) and isinstance(last, str):
        return [chr(code) for code in range(ord(first), ord(last))]
    return list(range(first, last))


@dataclass(frozen=True)
class GlyphData:
    """Where a glyph sits in the atlas, in atlas-relative units."""

    offset: tuple[float, float]
    size: tuple[float, float]
    vertical_offset: float = 0.0


@dataclass(frozen=True)
class GlyphQuad:
    """One glyph placed on screen together with its region of the atlas."""

    quad_position: tuple[float, float]
    quad_size: tuple[float, float]
    glyph_offset: tuple[float, float]
    glyph_size: tuple[float, float]


def atlas_cells(char_count: int, atlas_size: int) -> tuple[int, int, int, int]:
    """Grid for ``char_count`` glyphs: (rows, columns, cell width, cell height) in pixels."""
    if char_count <= 0:
        raise ValueError("an atlas needs at least one character")
    if atlas_size <= 0:
        raise ValueError("atlas size must be positive")
    rows = math.ceil(math.sqrt(char_count))
    columns = math.ceil(char_count / rows)
    cell_width = math.ceil(atlas_size / rows)
    cell_height = math.ceil(atlas_size / columns)
    return rows, columns, cell_width, cell_height


def pack_atlas(
    glyph_bounds: Mapping[str, GlyphBounds | None], atlas_size: int = DEFAULT_ATLAS_SIZE
) -> dict[str, GlyphData]:
    """Place glyphs row by row in a square atlas.

    ``glyph_bounds`` maps each character to its bounds ``(x_min, x_max, y_min, y_max)``,
    or to None when the font has no glyph for it; such characters are skipped with a
    warning. Raises ValueError when the glyphs do not fit.
    """
    _, _, cell_width, cell_height = atlas_cells(len(glyph_bounds), atlas_size)
    glyphs: dict[str, GlyphData] = {}
    x = 0.0
    y = 0.0
    largest_height = 0
    for char, bounds in glyph_bounds.items():
        if bounds is None:
            warnings.warn(f"failed to find {char!r} glyph", RuntimeWarning, stacklevel=2)
            continue
        x_min, x_max, y_min, y_max = bounds
        glyph_cell_width = math.floor(min(cell_width, (x_max - x_min) * cell_width))
        glyph_cell_height = math.floor(min(cell_height, (y_max - y_min) * cell_width))
        largest_height = max(largest_height, glyph_cell_height)

        glyphs[char] = GlyphData(
            offset=(x / atlas_size, y / atlas_size),
            size=(glyph_cell_width / atlas_size, largest_height / atlas_size),
            vertical_offset=y_min / 10,
        )

        x += glyph_cell_width + 1
        if x + cell_width > atlas_size:
            x = 0.0
            y += largest_height + 1
            if y + largest_height >= atlas_size:
                raise ValueError("glyphs do not fit in the atlas")
    return glyphs


@dataclass
class Font:
    """A packed glyph atlas and the spacing rules used to lay out text."""

    glyphs: dict[str, GlyphData] = field(default_factory=dict)
    space_size: float = 0.05
    new_line_size: float = 0.1
    spacing: float = 0.005
    atlas_size: int = DEFAULT_ATLAS_SIZE

    @classmethod
    def from_bounds(
        cls, glyph_bounds: Mapping[str, GlyphBounds | None], atlas_size: int = DEFAULT_ATLAS_SIZE
    ) -> Font:
        """Build a font by packing the given glyph bounds into an atlas."""
        return cls(glyphs=pack_atlas(glyph_bounds, atlas_size), atlas_size=atlas_size)

    def layout(self, text: str, position, size: float) -> list[GlyphQuad]:
        """Quads for every visible character of ``text`` starting at ``position``."""
        start_x, start_y = (float(value) for value in position)
        x, y = start_x, start_y
        quads: list[GlyphQuad] = []
        for char in text:
            if char == " ":
                x += size * self.space_size
                continue
            if char == "\n":
                x = start_x
                y -= self.new_line_size * size
                continue
            try:
                data = self.glyphs[char]
            except KeyError:
                raise KeyError(f"failed to find glyph for char {char!r}") from None
            width, height = data.size
            quads.append(
                GlyphQuad(
                    quad_position=(x, y + data.vertical_offset * size),
                    quad_size=(width * size, height * size),
                    glyph_offset=data.offset,
                    glyph_size=data.size,
                )
            )
            x += width * size + self.spacing
        return quads