"""
Shared fixtures: weapon script copies and VTF byte builders.
"""
import shutil
import struct
from pathlib import Path

import pytest

from core.services.texture_service import DEPTH, HEADER, HIGH_RES_RESOURCE, VTF_SIGNATURE, VTFFormat


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCRIPTS_FIXTURES = FIXTURES_DIR / "scripts"

LOW_RES_RESOURCE = b"\x01\x00\x00"


def vtf_header(width, height, image_format, version=(7, 2), header_size=80,
               mipmap_count=1, flags=0, frames=1, first_frame=0):
    """Fixed VTF header fields, depth included from 7.2 on."""
    header = HEADER.pack(
        VTF_SIGNATURE, version[0], version[1], header_size,
        width, height, flags, frames, first_frame,
        0.0, 0.0, 0.0, 1.0,
        int(image_format), mipmap_count, int(VTFFormat.NONE), 0, 0)
    if version[1] >= 2:
        header += DEPTH.pack(1)
    return header


def build_vtf(width, height, image_format, image_data, version=(7, 2), smaller_mips=(),
              flags=0, first_frame=0):
    """
    Assemble a VTF file holding one frame.

    ``smaller_mips`` are the lower mipmaps ordered smallest first, they are
    stored in front of ``image_data`` like the format requires.
    """
    mipmap_count = len(smaller_mips) + 1
    image_section = b"".join(smaller_mips) + image_data

    if version[1] < 3:
        header = vtf_header(width, height, image_format, version, 80, mipmap_count,
                            flags=flags, first_frame=first_frame)
        return header.ljust(80, b"\x00") + image_section

    header_size = 80 + 8
    header = vtf_header(width, height, image_format, version, header_size, mipmap_count,
                        flags=flags, first_frame=first_frame)
    header = header.ljust(68, b"\x00") + struct.pack("<I", 1)
    header = header.ljust(80, b"\x00")
    header += struct.pack("<3sBI", HIGH_RES_RESOURCE, 0, header_size)
    return header + image_section


def bgra_pixels(pixels):
    """Pack (r, g, b, a) tuples as BGRA8888 bytes."""
    return b"".join(bytes((b, g, r, a)) for r, g, b, a in pixels)


def dxt1_solid_block(rgb565):
    """4x4 DXT1 block where every texel uses color0."""
    return struct.pack("<HHI", rgb565, 0x0000, 0)


@pytest.fixture
def make_vtf():
    return build_vtf


@pytest.fixture
def scripts_dir(tmp_path):
    """Writable copy of the fixture weapon scripts."""
    target = tmp_path / "scripts"
    shutil.copytree(SCRIPTS_FIXTURES, target)
    return target


@pytest.fixture
def thumbnails_dir(tmp_path):
    target = tmp_path / "materials" / "vgui" / "replay" / "thumbnails"
    target.mkdir(parents=True)
    return target


@pytest.fixture
def red_square_vtf():
    """2x2 opaque red BGRA8888 texture."""
    return build_vtf(2, 2, VTFFormat.BGRA8888, bgra_pixels([(255, 0, 0, 255)] * 4))
