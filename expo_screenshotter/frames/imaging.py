"""Raster compositing primitives used by the device frame stage."""

from __future__ import annotations

from typing import Protocol

from PIL import Image, ImageChops, ImageDraw

TRANSPARENT = (0, 0, 0, 0)


class ImageCompositor(Protocol):
    def composite(
        self, base: Image.Image, overlay: Image.Image, corner_radius: float
    ) -> Image.Image: ...

    def resize_cover_fit(self, image: Image.Image, width: int, height: int) -> Image.Image: ...


class PillowCompositor:
    """ImageCompositor backed by Pillow."""

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self._resample = resample

    def rounded_mask(self, size: tuple[int, int], corner_radius: float) -> Image.Image:
        """8-bit mask that is opaque inside a rounded rectangle covering ``size``."""
        width, height = size
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, width - 1, height - 1), radius=round(corner_radius), fill=255
        )
        return mask

    def composite(
        self, base: Image.Image, overlay: Image.Image, corner_radius: float
    ) -> Image.Image:
        """Clip ``base`` to rounded corners and stack ``overlay`` on top.

        The result has the size of ``base``; the overlay is stretched to fit.
        """
        clipped = base.convert("RGBA")
        mask = self.rounded_mask(clipped.size, corner_radius)
        clipped.putalpha(ImageChops.multiply(clipped.getchannel("A"), mask))

        canvas = Image.new("RGBA", clipped.size, TRANSPARENT)
        canvas.alpha_composite(clipped)

        frame = overlay.convert("RGBA")
        if frame.size != canvas.size:
            frame = frame.resize(canvas.size, self._resample)
        canvas.alpha_composite(frame)
        return canvas

    def resize_cover_fit(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """Scale to cover ``width`` x ``height``, center, and crop the overflow."""
        src_width, src_height = image.size
        scale = max(width / src_width, height / src_height)
        scaled_size = (
            max(width, round(src_width * scale)),
            max(height, round(src_height * scale)),
        )
        scaled = image.convert("RGBA").resize(scaled_size, self._resample)

        canvas = Image.new("RGBA", (width, height), TRANSPARENT)
        offset = ((width - scaled_size[0]) // 2, (height - scaled_size[1]) // 2)
        canvas.paste(scaled, offset)
        return canvas
