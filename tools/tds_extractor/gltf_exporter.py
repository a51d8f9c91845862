"""glTF exporter for 3DS material libraries."""
import logging
from typing import Dict, List, Optional

from pygltflib import (
    GLTF2,
    Asset,
    Image,
    Material as GLTFMaterial,
    PbrMetallicRoughness,
    Scene,
    Texture,
    TextureInfo,
)

from tds_types import Material, Root

logger = logging.getLogger(__name__)


class GLTFExporter:
    """Exports the materials of a parsed 3DS file to a glTF document."""

    GENERATOR = "3DS Material Extractor"

    def __init__(self, root: Root):
        """Initialize exporter with a parsed 3DS tree.

        Args:
            root: Result of TdsParser.read_main()
        """
        self.root = root

    def _texture_file(self, material: Material) -> Optional[str]:
        """First named texture map of a material."""
        for texture_map in material.texture_maps:
            if texture_map.name:
                return texture_map.name
        return None

    def build(self) -> GLTF2:
        """Build the glTF document in memory.

        Raises:
            ValueError: If the tree holds no materials
        """
        materials = self.root.materials
        if not materials:
            raise ValueError("No materials found in 3DS data")

        gltf = GLTF2()
        gltf.asset = Asset(version="2.0", generator=self.GENERATOR)

        # One image/texture pair per distinct file name
        texture_index: Dict[str, int] = {}
        images: List[Image] = []
        textures: List[Texture] = []
        gltf_materials: List[GLTFMaterial] = []

        for i, material in enumerate(materials):
            pbr = PbrMetallicRoughness(metallicFactor=0.0)

            texture_file = self._texture_file(material)
            if texture_file is not None:
                if texture_file not in texture_index:
                    texture_index[texture_file] = len(textures)
                    images.append(Image(uri=texture_file, name=texture_file))
                    textures.append(Texture(source=len(images) - 1))
                pbr.baseColorTexture = TextureInfo(index=texture_index[texture_file])
            else:
                logger.debug("material %d (%s) has no named texture map", i, material.name)

            gltf_materials.append(
                GLTFMaterial(
                    name=material.name or f"material_{i}",
                    pbrMetallicRoughness=pbr,
                )
            )

        gltf.materials = gltf_materials
        gltf.images = images
        gltf.textures = textures
        gltf.scenes = [Scene(nodes=[])]
        gltf.scene = 0

        return gltf

    def export(self, output_path: str):
        """Export materials to a .gltf file.

        Args:
            output_path: Path for output .gltf file

        Raises:
            ValueError: If the tree holds no materials
        """
        gltf = self.build()
        gltf.save(output_path)
        logger.info("wrote %d materials, %d textures to %s", len(gltf.materials), len(gltf.textures), output_path)
