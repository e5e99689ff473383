"""Shader programs assembled from the shader sources found in a directory."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path


class ShaderType(enum.IntEnum):
    FRAGMENT = 0x8B30
    VERTEX = 0x8B31
    GEOMETRY = 0x8DD9
    COMPUTE = 0x91B9


_EXTENSIONS = {
    ".vert": ShaderType.VERTEX,
    ".geom": ShaderType.GEOMETRY,
    ".frag": ShaderType.FRAGMENT,
    ".comp": ShaderType.COMPUTE,
}

_TYPE_NAMES = {
    ShaderType.VERTEX: "vertex",
    ShaderType.GEOMETRY: "geometry",
    ShaderType.FRAGMENT: "fragment",
    ShaderType.COMPUTE: "compute",
}


@dataclass
class Shader:
    type: ShaderType
    source: str
    render_id: int = 0


class ShaderError(Exception):
    """A shader program could not be set up; the log tells why."""

    def __init__(self, message: str, log: str = "") -> None:
        super().__init__(message)
        self.log = log


def shader_type_name(shader_type: int) -> str:
    """Human-readable name of a shader stage."""
    try:
        return _TYPE_NAMES[ShaderType(shader_type)]
    except ValueError:
        return "unknown type"


class ShaderProgram:
    """The shader stages of one program, gathered from a directory tree."""

    def __init__(self, directory: str | Path | None = None, show_log: bool = True) -> None:
        self._shaders: list[Shader] = []
        self._log = ""
        self._path = ""
        if directory is None:
            return
        try:
            self.collect_shaders(directory)
        except OSError as error:
            self._log = f'failed to collect shaders in directory "{directory}"\n{error}\n' + self._log
            if show_log:
                print(self._log, end="")
            raise ShaderError("failed to init shader program", self._log) from error

    @property
    def shaders(self) -> tuple[Shader, ...]:
        return tuple(self._shaders)

    @property
    def path(self) -> str:
        return self._path

    @property
    def log(self) -> str:
        return self._log

    def collect_shaders(self, directory: str | Path) -> tuple[Shader, ...]:
        """Read every shader file below the directory, replacing the current stages.

        Files with unknown extensions are skipped and noted in the log. If the
        directory does not exist the program is left unchanged.
        """
        root = Path(directory)
        if not root.is_dir():
            raise FileNotFoundError(f"shader directory {str(root)!r} does not exist")
        shaders: list[Shader] = []
        log: list[str] = []
        for path in sorted(entry for entry in root.rglob("*") if entry.is_file()):
            shader_type = _EXTENSIONS.get(path.suffix)
            if shader_type is None:
                log.append(f'unrecognised shader extension: "{path.suffix}"\n')
                continue
            source = path.read_text(encoding="utf-8", errors="surrogateescape")
            shaders.append(Shader(shader_type, source))
        self._path = str(directory)
        self._log = "".join(log)
        self._shaders = shaders
        return tuple(shaders)