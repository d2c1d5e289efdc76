"""
CompressionService tests against the real Pillow codecs
"""
import io
import pytest
from PIL import Image

from models.processing import CompressionOptions
from services.compression_service import CompressionService, compress_image_bytes


def open_image(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


@pytest.mark.unit
@pytest.mark.asyncio
class TestCompressionService:

    async def test_reencode_to_webp(self, jpeg_bytes):
        service = CompressionService()
        success, output, error = await service.compress(
            jpeg_bytes, CompressionOptions(format="webp", quality=95)
        )

        assert success is True
        assert error is None
        assert open_image(output).format == "WEBP"

    async def test_reencode_to_png(self, jpeg_bytes):
        success, output, _ = await CompressionService().compress(
            jpeg_bytes, CompressionOptions(format="png")
        )
        assert success is True
        assert open_image(output).format == "PNG"

    async def test_unreadable_input_fails(self):
        success, output, error = await CompressionService().compress(
            b"definitely not an image", CompressionOptions()
        )

        assert success is False
        assert output is None
        assert "not a readable image" in error


@pytest.mark.unit
class TestCompressImageBytes:

    def test_resize_fits_inside_width(self, noisy_jpeg_bytes):
        output = compress_image_bytes(noisy_jpeg_bytes, CompressionOptions(format="jpeg", quality=80, width=100))
        assert open_image(output).size == (100, 50)

    def test_resize_fits_inside_height(self, noisy_jpeg_bytes):
        output = compress_image_bytes(noisy_jpeg_bytes, CompressionOptions(format="jpeg", quality=80, height=50))
        assert open_image(output).size == (100, 50)

    def test_resize_fits_inside_box(self, noisy_jpeg_bytes):
        output = compress_image_bytes(
            noisy_jpeg_bytes, CompressionOptions(format="jpeg", quality=80, width=300, height=50)
        )
        assert open_image(output).size == (100, 50)

    def test_never_upscales(self, noisy_jpeg_bytes):
        output = compress_image_bytes(
            noisy_jpeg_bytes, CompressionOptions(format="jpeg", quality=80, width=4000, height=4000)
        )
        assert open_image(output).size == (400, 200)

    def test_alpha_flattened_for_jpeg(self, png_rgba_bytes):
        output = compress_image_bytes(png_rgba_bytes, CompressionOptions(format="jpeg", quality=80))
        image = open_image(output)
        assert image.format == "JPEG"
        assert image.mode == "RGB"

    def test_alpha_kept_for_png(self, png_rgba_bytes):
        output = compress_image_bytes(png_rgba_bytes, CompressionOptions(format="png"))
        assert open_image(output).mode == "RGBA"

    def test_lower_quality_is_smaller(self, noisy_jpeg_bytes):
        low = compress_image_bytes(noisy_jpeg_bytes, CompressionOptions(format="jpeg", quality=40))
        high = compress_image_bytes(noisy_jpeg_bytes, CompressionOptions(format="jpeg", quality=95))
        assert len(low) < len(high)
