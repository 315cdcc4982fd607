"""
Tests for VTF decoding and the crosshair thumbnail scan.
"""
import io
import logging

import pytest
from PIL import Image

from conftest import bgra_pixels, build_vtf, dxt1_solid_block
from core.exceptions import DecodeError, NotFoundError
from core.services.texture_service import (
    TEXTUREFLAGS_ENVMAP, TextureService, VTFFormat, decode_vtf, image_data_size, parse_header
)


class TestParseHeader:

    def test_reads_dimensions_and_format(self, red_square_vtf):
        header = parse_header(red_square_vtf)

        assert header.version == (7, 2)
        assert (header.width, header.height) == (2, 2)
        assert header.high_res_format is VTFFormat.BGRA8888
        assert header.low_res_format is VTFFormat.NONE
        assert header.faces == 1

    def test_bad_signature(self, red_square_vtf):
        with pytest.raises(DecodeError, match="signature"):
            parse_header(b"XXXX" + red_square_vtf[4:])

    def test_too_short(self):
        with pytest.raises(DecodeError):
            parse_header(b"VTF\x00\x07")

    @pytest.mark.parametrize("version, first_frame, faces", [
        ((7, 2), 0, 7),
        ((7, 2), 0xFFFF, 6),
        ((7, 5), 0, 6),
    ])
    def test_cubemap_face_count(self, version, first_frame, faces):
        data = build_vtf(1, 1, VTFFormat.BGRA8888, b"\x00" * 4, version=version,
                         flags=TEXTUREFLAGS_ENVMAP, first_frame=first_frame)

        assert parse_header(data).faces == faces

    def test_unsupported_version(self):
        data = build_vtf(1, 1, VTFFormat.RGBA8888, b"\x00" * 4, version=(7, 9))
        with pytest.raises(DecodeError, match="version"):
            parse_header(data)


class TestImageDataSize:

    def test_uncompressed(self):
        assert image_data_size(VTFFormat.RGB888, 4, 2) == 24

    def test_block_compressed_rounds_up(self):
        assert image_data_size(VTFFormat.DXT1, 2, 2) == 8
        assert image_data_size(VTFFormat.DXT5, 8, 4) == 32

    def test_no_image(self):
        assert image_data_size(VTFFormat.NONE, 16, 16) == 0


class TestDecode:

    def test_bgra8888(self):
        pixels = [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 128), (10, 20, 30, 0)]
        texture = decode_vtf(build_vtf(2, 2, VTFFormat.BGRA8888, bgra_pixels(pixels)))

        assert (texture.width, texture.height) == (2, 2)
        assert texture.image.mode == "RGBA"
        assert list(texture.image.getdata()) == pixels

    def test_rgb888_is_opaque(self):
        data = build_vtf(1, 1, VTFFormat.RGB888, bytes((1, 2, 3)))

        assert decode_vtf(data).image.getpixel((0, 0)) == (1, 2, 3, 255)

    def test_bluescreen_becomes_transparent(self):
        # BGR order: pure blue then white
        data = build_vtf(2, 1, VTFFormat.BGR888_BLUESCREEN, bytes((255, 0, 0, 255, 255, 255)))
        image = decode_vtf(data).image

        assert image.getpixel((0, 0))[3] == 0
        assert image.getpixel((1, 0)) == (255, 255, 255, 255)

    def test_i8_is_grey(self):
        data = build_vtf(1, 1, VTFFormat.I8, bytes((77,)))

        assert decode_vtf(data).image.getpixel((0, 0)) == (77, 77, 77, 255)

    def test_largest_mipmap_after_resource_directory(self):
        mip_1x1 = bgra_pixels([(0, 0, 0, 255)])
        mip_2x2 = bgra_pixels([(0, 0, 0, 255)] * 4)
        full = bgra_pixels([(0, 255, 0, 255)] * 16)
        data = build_vtf(4, 4, VTFFormat.BGRA8888, full, version=(7, 4),
                         smaller_mips=(mip_1x1, mip_2x2))

        texture = decode_vtf(data)

        assert (texture.width, texture.height) == (4, 4)
        assert set(texture.image.getdata()) == {(0, 255, 0, 255)}

    def test_cubemap_skips_every_face_of_smaller_mips(self):
        # 7.2 cube maps with a start frame carry 7 faces per mipmap
        mip_1x1 = bgra_pixels([(0, 0, 0, 255)] * 7)
        face_0 = bgra_pixels([(0, 255, 0, 255)] * 4)
        data = build_vtf(2, 2, VTFFormat.BGRA8888, face_0, smaller_mips=(mip_1x1,),
                         flags=TEXTUREFLAGS_ENVMAP, first_frame=0)

        assert set(decode_vtf(data).image.getdata()) == {(0, 255, 0, 255)}

    def test_dxt1(self):
        # 0xF800 is pure red in RGB565
        data = build_vtf(4, 4, VTFFormat.DXT1, dxt1_solid_block(0xF800))

        texture = decode_vtf(data)

        assert (texture.width, texture.height) == (4, 4)
        assert texture.image.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_truncated_data(self, red_square_vtf):
        with pytest.raises(DecodeError, match="truncated"):
            decode_vtf(red_square_vtf[:-1])

    def test_unsupported_format(self):
        data = build_vtf(1, 1, VTFFormat.RGBA16161616F, b"\x00" * 8)

        with pytest.raises(DecodeError, match="Unsupported image format"):
            decode_vtf(data)

    def test_png_export(self, red_square_vtf):
        png = decode_vtf(red_square_vtf).to_png()

        assert png.startswith(b"\x89PNG")
        with Image.open(io.BytesIO(png)) as image:
            assert image.size == (2, 2)


class TestTextureService:

    def test_scan_skips_corrupt_files(self, thumbnails_dir, red_square_vtf, caplog):
        for name in ("c.vtf", "a.vtf", "e.VTF"):
            (thumbnails_dir / name).write_bytes(red_square_vtf)
        (thumbnails_dir / "b.vtf").write_bytes(b"not a texture")
        (thumbnails_dir / "d.vtf").write_bytes(red_square_vtf[:90])
        (thumbnails_dir / "readme.txt").write_text("ignored")

        service = TextureService(thumbnails_dir, max_workers=3)
        with caplog.at_level(logging.ERROR):
            result = service.scan_directory()

        assert [item.name for item in result.items] == ["a.vtf", "b.vtf", "c.vtf", "d.vtf", "e.VTF"]
        assert len(result.thumbnails) == 3
        assert sorted(name for name, _ in result.failures) == ["b.vtf", "d.vtf"]
        assert caplog.text.count("Skipping") == 2

        sizes = {item.name: item.size for item in result.items}
        assert sizes["a.vtf"] == (2, 2)
        assert sizes["b.vtf"] == (0, 0)
        assert result.thumbnail_for(result.items[1]) is None
        assert result.thumbnail_for(result.items[0]).startswith(b"\x89PNG")

    def test_missing_directory(self, tmp_path):
        service = TextureService(tmp_path / "thumbnails")

        with pytest.raises(NotFoundError):
            service.scan_directory()

    def test_decode_missing_file(self, thumbnails_dir):
        service = TextureService(thumbnails_dir)

        with pytest.raises(NotFoundError):
            service.decode_file(thumbnails_dir / "missing.vtf")
