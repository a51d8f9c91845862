"""Type definitions for the 3DS scene format."""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class ChunkHeader:
    """3DS chunk header."""

    id: int
    offset: int
    length: int  # total chunk size, header included

    HEADER_SIZE = 6

    @property
    def body_offset(self) -> int:
        return self.offset + self.HEADER_SIZE

    @property
    def end_offset(self) -> int:
        return self.offset + self.length

    def __repr__(self) -> str:
        return f"ChunkHeader(id=0x{self.id:04x}, offset=0x{self.offset:x}, length=0x{self.length:x})"


@dataclass(frozen=True)
class TextureMapName:
    """File name referenced by a texture map."""

    text: str

    def to_dict(self) -> Dict:
        return {"name": self.text}


@dataclass(frozen=True)
class TextureMap:
    """Texture map group inside a material."""

    entries: Tuple[TextureMapName, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))

    @property
    def name(self) -> Optional[str]:
        names = [e.text for e in self.entries if isinstance(e, TextureMapName)]
        return names[-1] if names else None

    def to_dict(self) -> Dict:
        return {"texture_map": [e.to_dict() for e in self.entries]}


@dataclass(frozen=True)
class MaterialName:
    """Name of a material."""

    text: str

    def to_dict(self) -> Dict:
        return {"name": self.text}


MaterialEntry = Union[MaterialName, TextureMap]


@dataclass(frozen=True)
class Material:
    """Material group. Entries keep file order."""

    entries: Tuple[MaterialEntry, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))

    @property
    def name(self) -> Optional[str]:
        """Text of the last name entry, or None if the material is unnamed."""
        names = [e.text for e in self.entries if isinstance(e, MaterialName)]
        return names[-1] if names else None

    @property
    def texture_maps(self) -> List[TextureMap]:
        return [e for e in self.entries if isinstance(e, TextureMap)]

    def to_dict(self) -> Dict:
        return {"material": [e.to_dict() for e in self.entries]}


@dataclass(frozen=True)
class Editor:
    """Editor (scene) group."""

    materials: Tuple[Material, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "materials", tuple(self.materials))

    def to_dict(self) -> Dict:
        return {"editor": [m.to_dict() for m in self.materials]}


@dataclass(frozen=True)
class Root:
    """Parsed 3DS file."""

    editors: Tuple[Editor, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "editors", tuple(self.editors))

    @property
    def materials(self) -> List[Material]:
        """All materials across every editor, in file order."""
        return [m for editor in self.editors for m in editor.materials]

    def to_dict(self) -> Dict:
        return {"root": [e.to_dict() for e in self.editors]}


class TdsParseError(ValueError):
    """Base error for malformed 3DS data."""

    kind = "error"

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset 0x{offset:x}")
        self.offset = offset


class TruncatedChunkError(TdsParseError):
    """Fewer bytes remain than a header requires."""

    kind = "truncation"


class ChunkBoundsError(TdsParseError):
    """A chunk's extent is impossible or escapes its parent or the buffer."""

    kind = "structure"


class ChunkStringError(TdsParseError):
    """A name chunk has no terminator or is not valid UTF-8."""

    kind = "encoding"


class UnsupportedRootError(TdsParseError):
    """The outermost chunk is not a 3DS root chunk."""

    kind = "unsupported_root"
