"""Chunk identifiers for the 3DS scene format.

Every chunk starts with a 6 byte header:
- +0x000: chunk id (uint16)
- +0x002: total chunk length, header included (uint32)

Only a handful of ids are interpreted by the parser (root, editor, material,
material name, texture map, texture map name). The rest are listed so that
skipped chunks can be named in debug output.
"""
from enum import IntEnum


class ChunkId(IntEnum):
    """Known 3DS chunk ids."""

    # Root level
    MAIN = 0x4D4D
    MAIN_VERSION = 0x0002
    MAIN_EDITOR = 0x3D3D
    MAIN_KEYFRAMES = 0xB000

    # Editor level
    EDIT_VERSION = 0x3D3E
    EDIT_MASTER_SCALE = 0x0100
    EDIT_BACKGROUND_BITMAP = 0x1100
    EDIT_AMBIENT_LIGHT = 0x2100
    EDIT_FOG = 0x2200
    EDIT_MATERIAL = 0xAFFF
    EDIT_OBJECT = 0x4000

    # Object level
    OBJECT_MESH = 0x4100
    OBJECT_LIGHT = 0x4600
    OBJECT_CAMERA = 0x4700
    MESH_VERTICES = 0x4110
    MESH_FACES = 0x4120
    MESH_FACE_MATERIAL = 0x4130
    MESH_UV = 0x4140
    MESH_SMOOTH = 0x4150
    MESH_MATRIX = 0x4160

    # Material level
    MATERIAL_NAME = 0xA000
    MATERIAL_AMBIENT = 0xA010
    MATERIAL_DIFFUSE = 0xA020
    MATERIAL_SPECULAR = 0xA030
    MATERIAL_SHININESS = 0xA040
    MATERIAL_TRANSPARENCY = 0xA050
    MATERIAL_TWO_SIDED = 0xA081
    MATERIAL_SHADING = 0xA100
    MATERIAL_TEXTURE_MAP = 0xA200
    MATERIAL_SPECULAR_MAP = 0xA204
    MATERIAL_OPACITY_MAP = 0xA210
    MATERIAL_REFLECTION_MAP = 0xA220
    MATERIAL_BUMP_MAP = 0xA230

    # Texture map level
    MAP_NAME = 0xA300
    MAP_TILING = 0xA351
    MAP_BLUR = 0xA353
    MAP_U_SCALE = 0xA354
    MAP_V_SCALE = 0xA356
    MAP_U_OFFSET = 0xA358
    MAP_V_OFFSET = 0xA35A
    MAP_ANGLE = 0xA35C

    # Shared sub-chunks
    COLOR_FLOAT = 0x0010
    COLOR_24 = 0x0011
    PERCENT_SHORT = 0x0030
    PERCENT_FLOAT = 0x0031


def chunk_name(chunk_id: int) -> str:
    """Get a readable name for a chunk id, falling back to hex."""
    try:
        return ChunkId(chunk_id).name
    except ValueError:
        return f"UNKNOWN_{chunk_id:04X}"
