"""Parser for 3DS scene files.

The format is a tree of length-prefixed chunks. Each walker below reads the
children of one container chunk, hands recognized ids to a handler, and then
always seeks to the end of the child as declared by its header. Unknown ids
are skipped the same way, so extensions of the format never break the parse.
Only the root chunk id is mandatory.
"""
import io
import logging
import struct
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from tds_chunks import ChunkId, chunk_name
from tds_types import (
    ChunkBoundsError,
    ChunkHeader,
    ChunkStringError,
    Editor,
    Material,
    MaterialName,
    Root,
    TextureMap,
    TextureMapName,
    TruncatedChunkError,
    UnsupportedRootError,
)

logger = logging.getLogger(__name__)

# None marks a chunk that is recognized but not represented in the tree
Handler = Optional[Callable[[ChunkHeader], object]]


class TdsParser:
    """Parses 3DS files held in memory."""

    HEADER_SIZE = 6
    ROOT_ID = ChunkId.MAIN

    def __init__(self, data: bytes):
        """Initialize parser over a complete 3DS buffer.

        Args:
            data: Raw file contents
        """
        self.data = bytes(data)
        self.stream = io.BytesIO(self.data)

    @property
    def position(self) -> int:
        return self.stream.tell()

    @property
    def remaining(self) -> int:
        return max(len(self.data) - self.stream.tell(), 0)

    def read_chunk_header(self) -> ChunkHeader:
        """Read the chunk header at the cursor.

        Returns:
            ChunkHeader starting at the cursor position

        Raises:
            TruncatedChunkError: If fewer than 6 bytes remain
        """
        offset = self.stream.tell()
        raw = self.stream.read(self.HEADER_SIZE)
        if len(raw) < self.HEADER_SIZE:
            raise TruncatedChunkError(
                f"Chunk header needs {self.HEADER_SIZE} bytes, only {len(raw)} left", offset
            )

        chunk_id, length = struct.unpack("<HI", raw)
        return ChunkHeader(id=chunk_id, offset=offset, length=length)

    def skip_to_end(self, header: ChunkHeader):
        """Move the cursor to the end of a chunk, however much of it was read.

        Raises:
            ChunkBoundsError: If the chunk ends past the buffer
        """
        end = header.end_offset
        if end > len(self.data):
            raise ChunkBoundsError(
                f"{chunk_name(header.id)} ends at 0x{end:x}, past end of data (0x{len(self.data):x})",
                header.offset,
            )
        self.stream.seek(end)

    def _check_length(self, header: ChunkHeader):
        if header.length < self.HEADER_SIZE:
            raise ChunkBoundsError(
                f"{chunk_name(header.id)} length {header.length} is shorter than its header",
                header.offset,
            )

    def _read_child_header(self, parent: ChunkHeader) -> ChunkHeader:
        """Read a child header and check it stays inside its parent."""
        header = self.read_chunk_header()
        self._check_length(header)
        if header.end_offset > parent.end_offset:
            raise ChunkBoundsError(
                f"{chunk_name(header.id)} ends at 0x{header.end_offset:x}, "
                f"past its parent {chunk_name(parent.id)} (0x{parent.end_offset:x})",
                header.offset,
            )
        return header

    def _walk(self, parent: ChunkHeader, level: str, handlers: Dict[int, Handler]) -> List:
        """Read every child of a container chunk.

        Args:
            parent: Header of the container
            level: Container name for log output
            handlers: Chunk id -> handler returning a tree entry, or None for
                chunks that are recognized but ignored

        Returns:
            Handler results in file order
        """
        items = []
        while self.stream.tell() < parent.end_offset:
            header = self._read_child_header(parent)

            if header.id not in handlers:
                logger.debug("unknown %s chunk %r, skipping", level, header)
            elif handlers[header.id] is None:
                logger.debug("%s chunk %s ignored: %r", level, chunk_name(header.id), header)
            else:
                logger.debug("%s chunk %s: %r", level, chunk_name(header.id), header)
                items.append(handlers[header.id](header))

            self.skip_to_end(header)

        return items

    def read_name(self, header: ChunkHeader) -> str:
        """Read the null-terminated UTF-8 string in a chunk body.

        Raises:
            ChunkStringError: If there is no terminator before the chunk ends,
                or the bytes are not valid UTF-8
        """
        start = header.body_offset
        end = self.data.find(b"\0", start, header.end_offset)
        if end == -1:
            raise ChunkStringError(f"{chunk_name(header.id)} string has no terminator", start)

        try:
            text = self.data[start:end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise ChunkStringError(
                f"{chunk_name(header.id)} string is not valid UTF-8 ({e.reason})", start + e.start
            ) from e

        self.stream.seek(end + 1)
        return text

    def read_main(self) -> Root:
        """Parse the whole buffer starting from the root chunk.

        Returns:
            Root with every editor group found

        Raises:
            UnsupportedRootError: If the first chunk is not a 3DS root
            TdsParseError: On truncated or corrupt data
        """
        self.stream.seek(0)
        root = self.read_chunk_header()
        logger.debug("root chunk: %r", root)

        if root.id != self.ROOT_ID:
            raise UnsupportedRootError(
                f"Invalid 3DS root chunk 0x{root.id:04x}, expected 0x{self.ROOT_ID:04x}", root.offset
            )
        self._check_length(root)
        if root.end_offset > len(self.data):
            raise ChunkBoundsError(
                f"{chunk_name(root.id)} ends at 0x{root.end_offset:x}, past end of data (0x{len(self.data):x})",
                root.offset,
            )

        editors = self._walk(root, "main", {
            ChunkId.MAIN_VERSION: None,
            ChunkId.MAIN_EDITOR: self.read_editor,
            ChunkId.MAIN_KEYFRAMES: None,
        })
        return Root(editors=editors)

    def read_editor(self, header: ChunkHeader) -> Editor:
        materials = self._walk(header, "editor", {
            ChunkId.EDIT_VERSION: None,
            ChunkId.EDIT_MATERIAL: self.read_material,
        })
        return Editor(materials=materials)

    def read_material(self, header: ChunkHeader) -> Material:
        entries = self._walk(header, "material", {
            ChunkId.MATERIAL_NAME: self._read_material_name,
            ChunkId.MATERIAL_TEXTURE_MAP: self.read_texture_map,
        })
        return Material(entries=entries)

    def read_texture_map(self, header: ChunkHeader) -> TextureMap:
        entries = self._walk(header, "texture map", {
            ChunkId.MAP_NAME: self._read_texture_map_name,
        })
        return TextureMap(entries=entries)

    def _read_material_name(self, header: ChunkHeader) -> MaterialName:
        name = self.read_name(header)
        logger.info("material name: %r", name)
        return MaterialName(name)

    def _read_texture_map_name(self, header: ChunkHeader) -> TextureMapName:
        name = self.read_name(header)
        logger.info("material texture map name: %r", name)
        return TextureMapName(name)


def parse_bytes(data: bytes) -> Root:
    """Parse a 3DS file already loaded into memory."""
    return TdsParser(data).read_main()


def parse_file(path: Union[str, Path]) -> Root:
    """Load and parse a 3DS file from disk."""
    with open(path, "rb") as f:
        data = f.read()
    return parse_bytes(data)
