"""Tests for 3DS material extraction CLI."""
import json
import os
import struct
import subprocess
import sys
import tempfile

TOOL_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def chunk(chunk_id, body=b""):
    return struct.pack("<HI", chunk_id, 6 + len(body)) + body


def create_test_3ds_file(name, texture):
    """Create a synthetic 3DS file with one textured material."""
    texture_map = chunk(0xA200, chunk(0xA300, texture.encode() + b"\x00"))
    material = chunk(0xAFFF, chunk(0xA000, name.encode() + b"\x00") + texture_map)
    editor = chunk(0x3D3D, chunk(0x3D3E, struct.pack("<I", 3)) + material)
    return chunk(0x4D4D, chunk(0x0002, struct.pack("<I", 3)) + editor)


def run_cli(*args):
    return subprocess.run(
        [sys.executable, "extract_materials.py", *args],
        capture_output=True,
        text=True,
        cwd=TOOL_DIR,
    )


def test_cli_help():
    """CLI should show help."""
    result = run_cli("--help")
    assert result.returncode == 0
    assert "usage" in result.stdout.lower()


def test_cli_summary_single():
    """CLI should list materials of a single file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_path = os.path.join(tmpdir, "tower.3ds")
        with open(input_path, "wb") as f:
            f.write(create_test_3ds_file("Wood", "wood.bmp"))

        result = run_cli(input_path)

        assert result.returncode == 0
        assert "Materials: 1" in result.stdout
        assert "Wood -> wood.bmp" in result.stdout
        assert "Parsed 1/1 files" in result.stdout


def test_cli_json():
    """CLI should print the parsed tree as JSON."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_path = os.path.join(tmpdir, "tower.3ds")
        with open(input_path, "wb") as f:
            f.write(create_test_3ds_file("Wood", "wood.bmp"))

        result = run_cli(input_path, "--json")

        assert result.returncode == 0
        trees = json.loads(result.stdout)
        assert trees[input_path] == {
            "root": [
                {"editor": [
                    {"material": [
                        {"name": "Wood"},
                        {"texture_map": [{"name": "wood.bmp"}]},
                    ]},
                ]},
            ]
        }


def test_cli_gltf_directory():
    """CLI should write a glTF file for every 3DS file in a directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_dir = os.path.join(tmpdir, "scenes")
        os.makedirs(input_dir)

        for name in ["house.3ds", "TREE.3DS"]:
            with open(os.path.join(input_dir, name), "wb") as f:
                f.write(create_test_3ds_file("Bark", "bark.bmp"))

        output_dir = os.path.join(tmpdir, "output")

        result = run_cli(input_dir, "--gltf", "-o", output_dir)

        assert result.returncode == 0
        assert os.path.exists(os.path.join(output_dir, "house.gltf"))
        assert os.path.exists(os.path.join(output_dir, "TREE.gltf"))


def test_cli_reports_bad_file():
    """CLI should report a corrupt file and keep going."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with open(os.path.join(tmpdir, "good.3ds"), "wb") as f:
            f.write(create_test_3ds_file("Wood", "wood.bmp"))
        with open(os.path.join(tmpdir, "bad.3ds"), "wb") as f:
            f.write(b"not a 3ds file")

        result = run_cli(tmpdir)

        assert result.returncode == 1
        assert "Failed:" in result.stderr
        assert "bad.3ds" in result.stderr
        assert "Parsed 1/2 files" in result.stdout


def test_cli_missing_input():
    result = run_cli("/nonexistent/scene.3ds")
    assert result.returncode == 1
    assert "Input not found" in result.stderr


def test_cli_gltf_keeps_subdirectories():
    """Files with the same name in different folders get separate outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        input_dir = os.path.join(tmpdir, "scenes")
        for sub, material in [("a", "Brick"), ("b", "Marble")]:
            os.makedirs(os.path.join(input_dir, sub))
            with open(os.path.join(input_dir, sub, "house.3ds"), "wb") as f:
                f.write(create_test_3ds_file(material, f"{material.lower()}.bmp"))

        output_dir = os.path.join(tmpdir, "output")

        result = run_cli(input_dir, "--gltf", "-o", output_dir)

        assert result.returncode == 0

        from pygltflib import GLTF2
        first = GLTF2.load(os.path.join(output_dir, "a", "house.gltf"))
        second = GLTF2.load(os.path.join(output_dir, "b", "house.gltf"))
        assert first.materials[0].name == "Brick"
        assert second.materials[0].name == "Marble"


def test_cli_gltf_single_file_uses_stem():
    with tempfile.TemporaryDirectory() as tmpdir:
        input_path = os.path.join(tmpdir, "tower.3ds")
        with open(input_path, "wb") as f:
            f.write(create_test_3ds_file("Wood", "wood.bmp"))

        output_dir = os.path.join(tmpdir, "output")
        result = run_cli(input_path, "--gltf", "-o", output_dir)

        assert result.returncode == 0
        assert os.path.exists(os.path.join(output_dir, "tower.gltf"))
