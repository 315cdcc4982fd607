"""
Valve Texture Format (VTF) decoding and crosshair thumbnail scanning.
"""
import io
import logging
import struct
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from core.exceptions import CrosshairSwitcherError, DecodeError, FileAccessError, NotFoundError
from core.models.crosshair import CrosshairItem


VTF_SIGNATURE = b"VTF\x00"

# signature, version major/minor, header size, width, height, flags,
# frames, first frame, reflectivity, bumpmap scale, high-res format,
# mipmap count, low-res format, low-res width, low-res height
HEADER = struct.Struct("<4s2IIHHIHH4x3f4xfiBiBB")
DEPTH = struct.Struct("<H")  # 7.2+, directly after HEADER
RESOURCE_COUNT_OFFSET = 68  # 7.3+
RESOURCE_TABLE_OFFSET = 80
RESOURCE_ENTRY = struct.Struct("<3sBI")

HIGH_RES_RESOURCE = b"\x30\x00\x00"

TEXTUREFLAGS_ENVMAP = 0x4000


class VTFFormat(IntEnum):
    """Pixel formats used by VTF images."""
    NONE = -1
    RGBA8888 = 0
    ABGR8888 = 1
    RGB888 = 2
    BGR888 = 3
    RGB565 = 4
    I8 = 5
    IA88 = 6
    P8 = 7
    A8 = 8
    RGB888_BLUESCREEN = 9
    BGR888_BLUESCREEN = 10
    ARGB8888 = 11
    BGRA8888 = 12
    DXT1 = 13
    DXT3 = 14
    DXT5 = 15
    BGRX8888 = 16
    BGR565 = 17
    BGRX5551 = 18
    BGRA4444 = 19
    DXT1_ONEBITALPHA = 20
    BGRA5551 = 21
    UV88 = 22
    UVWQ8888 = 23
    RGBA16161616F = 24
    RGBA16161616 = 25
    UVLX8888 = 26


BYTES_PER_PIXEL = {
    VTFFormat.RGBA8888: 4, VTFFormat.ABGR8888: 4, VTFFormat.RGB888: 3,
    VTFFormat.BGR888: 3, VTFFormat.RGB565: 2, VTFFormat.I8: 1,
    VTFFormat.IA88: 2, VTFFormat.P8: 1, VTFFormat.A8: 1,
    VTFFormat.RGB888_BLUESCREEN: 3, VTFFormat.BGR888_BLUESCREEN: 3,
    VTFFormat.ARGB8888: 4, VTFFormat.BGRA8888: 4, VTFFormat.BGRX8888: 4,
    VTFFormat.BGR565: 2, VTFFormat.BGRX5551: 2, VTFFormat.BGRA4444: 2,
    VTFFormat.BGRA5551: 2, VTFFormat.UV88: 2, VTFFormat.UVWQ8888: 4,
    VTFFormat.RGBA16161616F: 8, VTFFormat.RGBA16161616: 8,
    VTFFormat.UVLX8888: 4,
}

# DXT formats: bytes per 4x4 block and Pillow "bcn" decoder variant
BLOCK_FORMATS = {
    VTFFormat.DXT1: (8, 1),
    VTFFormat.DXT1_ONEBITALPHA: (8, 1),
    VTFFormat.DXT3: (16, 2),
    VTFFormat.DXT5: (16, 3),
}

# Byte layout of decodable uncompressed formats, L is a grey level
CHANNEL_ORDER = {
    VTFFormat.RGBA8888: "RGBA",
    VTFFormat.ABGR8888: "ABGR",
    VTFFormat.RGB888: "RGB",
    VTFFormat.BGR888: "BGR",
    VTFFormat.RGB888_BLUESCREEN: "RGB",
    VTFFormat.BGR888_BLUESCREEN: "BGR",
    VTFFormat.ARGB8888: "ARGB",
    VTFFormat.BGRA8888: "BGRA",
    VTFFormat.BGRX8888: "BGRX",
    VTFFormat.I8: "L",
    VTFFormat.IA88: "LA",
    VTFFormat.A8: "A",
}

BLUESCREEN_FORMATS = (VTFFormat.RGB888_BLUESCREEN, VTFFormat.BGR888_BLUESCREEN)


@dataclass(frozen=True)
class VTFHeader:
    """Fields of the VTF header needed to locate the high-res image."""

    version: Tuple[int, int]
    header_size: int
    width: int
    height: int
    flags: int
    frames: int
    first_frame: int
    high_res_format: VTFFormat
    mipmap_count: int
    low_res_format: VTFFormat
    low_res_width: int
    low_res_height: int
    depth: int = 1
    resources: Dict[bytes, int] = field(default_factory=dict)

    @property
    def faces(self) -> int:
        if not self.flags & TEXTUREFLAGS_ENVMAP:
            return 1
        # Pre 7.5 cube maps carry an extra spheremap face
        if self.version < (7, 5) and self.first_frame != 0xFFFF:
            return 7
        return 6


@dataclass
class DecodedTexture:
    """Largest mipmap of a texture converted to an RGBA bitmap."""

    image: Image.Image
    width: int
    height: int

    def to_png(self) -> bytes:
        """Encode the bitmap as PNG."""
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()


def _pixel_format(value: int) -> VTFFormat:
    try:
        return VTFFormat(value)
    except ValueError:
        raise DecodeError(f"Unknown image format {value}") from None


def image_data_size(image_format: VTFFormat, width: int, height: int) -> int:
    """Byte size of one image of the given format and dimensions."""
    if image_format == VTFFormat.NONE:
        return 0
    if image_format in BLOCK_FORMATS:
        block_bytes = BLOCK_FORMATS[image_format][0]
        return max(1, (width + 3) // 4) * max(1, (height + 3) // 4) * block_bytes
    return width * height * BYTES_PER_PIXEL[image_format]


def parse_header(data: bytes) -> VTFHeader:
    """
    Parse a VTF header.

    Raises:
        DecodeError: Signature, version or header size is invalid
    """
    if len(data) < HEADER.size:
        raise DecodeError("File too small for a VTF header")

    (signature, major, minor, header_size, width, height, flags, frames,
     first_frame, _rx, _ry, _rz, _bump_scale, high_res_format, mipmap_count,
     low_res_format, low_res_width, low_res_height) = HEADER.unpack_from(data)

    if signature != VTF_SIGNATURE:
        raise DecodeError("Invalid VTF signature")
    if major != 7 or minor > 5:
        raise DecodeError(f"Unsupported VTF version {major}.{minor}")
    if width == 0 or height == 0:
        raise DecodeError("Image has zero width or height")
    if header_size > len(data):
        raise DecodeError("Header size exceeds file size")

    depth = 1
    if minor >= 2:
        depth = max(1, DEPTH.unpack_from(data, HEADER.size)[0])

    resources = {}
    if minor >= 3:
        resources = _parse_resources(data)

    return VTFHeader(
        version=(major, minor),
        header_size=header_size,
        width=width,
        height=height,
        flags=flags,
        frames=max(1, frames),
        first_frame=first_frame,
        high_res_format=_pixel_format(high_res_format),
        mipmap_count=max(1, mipmap_count),
        low_res_format=_pixel_format(low_res_format),
        low_res_width=low_res_width,
        low_res_height=low_res_height,
        depth=depth,
        resources=resources,
    )


def _parse_resources(data: bytes) -> Dict[bytes, int]:
    """Read the 7.3+ resource directory as tag -> offset."""
    if len(data) < RESOURCE_TABLE_OFFSET:
        raise DecodeError("File too small for a VTF 7.3 header")

    count = struct.unpack_from("<I", data, RESOURCE_COUNT_OFFSET)[0]
    table_end = RESOURCE_TABLE_OFFSET + count * RESOURCE_ENTRY.size
    if table_end > len(data):
        raise DecodeError("Resource directory exceeds file size")

    resources = {}
    for index in range(count):
        tag, _flags, offset = RESOURCE_ENTRY.unpack_from(
            data, RESOURCE_TABLE_OFFSET + index * RESOURCE_ENTRY.size)
        resources[tag] = offset
    return resources


def _high_res_offset(header: VTFHeader) -> int:
    """Offset of frame 0 / face 0 / slice 0 of the largest mipmap."""
    if header.version >= (7, 3):
        if HIGH_RES_RESOURCE not in header.resources:
            raise DecodeError("Missing high-res image resource")
        offset = header.resources[HIGH_RES_RESOURCE]
    else:
        offset = header.header_size + image_data_size(
            header.low_res_format, header.low_res_width, header.low_res_height)

    # Mipmaps are stored smallest first
    for mip in range(header.mipmap_count - 1, 0, -1):
        mip_width = max(1, header.width >> mip)
        mip_height = max(1, header.height >> mip)
        mip_depth = max(1, header.depth >> mip)
        offset += (image_data_size(header.high_res_format, mip_width, mip_height)
                   * header.frames * header.faces * mip_depth)

    return offset


def _decode_uncompressed(image_format: VTFFormat, raw: bytes,
                         width: int, height: int) -> Image.Image:
    order = CHANNEL_ORDER[image_format]
    pixels = np.frombuffer(raw, dtype=np.uint8).reshape(height, width, len(order))

    rgba = np.full((height, width, 4), 255, dtype=np.uint8)
    for index, channel in enumerate(order):
        if channel == "L":
            rgba[..., :3] = pixels[..., index:index + 1]
        elif channel in "RGBA":
            rgba[..., "RGBA".index(channel)] = pixels[..., index]

    if image_format in BLUESCREEN_FORMATS:
        blue = (rgba[..., 0] == 0) & (rgba[..., 1] == 0) & (rgba[..., 2] == 255)
        rgba[blue, 3] = 0

    return Image.fromarray(rgba)


def _decode_block_compressed(image_format: VTFFormat, raw: bytes,
                             width: int, height: int) -> Image.Image:
    variant = BLOCK_FORMATS[image_format][1]
    try:
        return Image.frombytes("RGBA", (width, height), raw, "bcn", variant)
    except (ValueError, OSError) as e:
        raise DecodeError(f"Failed to decompress {image_format.name} data: {e}") from e


def decode_vtf(data: bytes) -> DecodedTexture:
    """
    Decode the highest resolution image of a VTF texture.

    Args:
        data: Complete VTF file content

    Returns:
        RGBA bitmap with the native texture width and height

    Raises:
        DecodeError: Data is malformed or uses an unsupported pixel format
    """
    header = parse_header(data)
    image_format = header.high_res_format

    if image_format not in CHANNEL_ORDER and image_format not in BLOCK_FORMATS:
        raise DecodeError(f"Unsupported image format {image_format.name}")

    offset = _high_res_offset(header)
    size = image_data_size(image_format, header.width, header.height)
    if offset + size > len(data):
        raise DecodeError("Image data is truncated")

    raw = data[offset:offset + size]
    if image_format in BLOCK_FORMATS:
        image = _decode_block_compressed(image_format, raw, header.width, header.height)
    else:
        image = _decode_uncompressed(image_format, raw, header.width, header.height)

    return DecodedTexture(image=image, width=header.width, height=header.height)


@dataclass
class ThumbnailScanResult:
    """Crosshair textures found in the thumbnails directory."""

    items: List[CrosshairItem] = field(default_factory=list)
    thumbnails: Dict[Path, bytes] = field(default_factory=dict)  # PNG data per texture path
    failures: List[Tuple[str, Exception]] = field(default_factory=list)

    def thumbnail_for(self, item: CrosshairItem) -> Optional[bytes]:
        return self.thumbnails.get(item.path)


class TextureService:
    """Scans and decodes crosshair textures."""

    def __init__(self, thumbnails_dir: Path, extension: str = ".vtf", max_workers: int = 8):
        self.logger = logging.getLogger("TextureService")
        self.thumbnails_dir = Path(thumbnails_dir)
        self.extension = extension.lower()
        self.max_workers = max(1, max_workers)

    def decode_file(self, path: Path) -> DecodedTexture:
        """
        Read and decode one texture file.

        Raises:
            NotFoundError: File does not exist
            FileAccessError: File could not be read
            DecodeError: Content is not a decodable VTF
        """
        path = Path(path)
        if not path.exists():
            raise NotFoundError(f"{path.name} doesn't exist")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise FileAccessError(f"Failed to open {path.name}: {e}") from e

        return decode_vtf(data)

    def list_textures(self) -> List[Path]:
        """
        Texture files in the thumbnails directory, sorted by name.

        Raises:
            NotFoundError: Directory is missing
            FileAccessError: Directory could not be listed
        """
        if not self.thumbnails_dir.is_dir():
            raise NotFoundError(f"Failed to find `{self.thumbnails_dir}` folder")

        try:
            return sorted(
                (path for path in self.thumbnails_dir.iterdir()
                 if path.is_file() and path.suffix.lower() == self.extension),
                key=lambda p: p.name.lower())
        except OSError as e:
            raise FileAccessError(f"Failed to read folder `{self.thumbnails_dir.name}`: {e}") from e

    def scan_directory(self) -> ThumbnailScanResult:
        """
        Decode every texture in the thumbnails directory.

        Files that fail to decode are logged and kept in the list with an
        unknown (0, 0) size and no thumbnail.

        Raises:
            NotFoundError: Directory is missing
            FileAccessError: Directory could not be listed
        """
        paths = self.list_textures()
        result = ThumbnailScanResult()

        with ThreadPoolExecutor(max_workers=self.max_workers,
                                thread_name_prefix="TextureDecoder") as executor:
            futures = [executor.submit(self._decode_thumbnail, path) for path in paths]

            for path, future in zip(paths, futures):
                try:
                    png_data, size = future.result()
                except CrosshairSwitcherError as e:
                    self.logger.error("Skipping %s; %s", path.name, e)
                    result.failures.append((path.name, e))
                    result.items.append(CrosshairItem(name=path.name, path=path))
                    continue
                except Exception as e:
                    self.logger.error("Skipping %s; unexpected error: %s",
                                      path.name, e, exc_info=True)
                    result.failures.append((path.name, e))
                    result.items.append(CrosshairItem(name=path.name, path=path))
                    continue

                result.items.append(CrosshairItem(name=path.name, path=path, size=size))
                result.thumbnails[path] = png_data

        self.logger.info("Decoded %s of %s crosshair textures",
                         len(result.thumbnails), len(paths))
        return result

    def _decode_thumbnail(self, path: Path) -> Tuple[bytes, Tuple[int, int]]:
        texture = self.decode_file(path)
        return texture.to_png(), (texture.width, texture.height)
