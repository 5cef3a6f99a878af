"""Launcher icon and splash screen generation with Pillow."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from PIL import Image, ImageOps, UnidentifiedImageError

from webtoapk.core.errors import ResourceError
from webtoapk.core.structlog_logger import StructlogMixin


Orientation = Literal["portrait", "landscape"]

ICON_FILENAME = "ic_launcher.png"
SPLASH_FILENAMES: dict[Orientation, str] = {
    "portrait": "splash_portrait.png",
    "landscape": "splash_landscape.png",
}
SPLASH_MIN_SIZE = (480, 800)
SUPPORTED_FORMATS = ("PNG", "JPEG", "WEBP")


@dataclass(frozen=True)
class IconSize:
    folder: str
    size: int


@dataclass(frozen=True)
class SplashSize:
    folder: str
    width: int
    height: int
    orientation: Orientation


ICON_SIZES: tuple[IconSize, ...] = (
    IconSize("drawable-ldpi", 36),
    IconSize("drawable-mdpi", 48),
    IconSize("drawable-hdpi", 72),
    IconSize("drawable-xhdpi", 96),
    IconSize("drawable-xxhdpi", 144),
    IconSize("drawable-xxxhdpi", 192),
    IconSize("mipmap-mdpi", 48),
    IconSize("mipmap-hdpi", 72),
    IconSize("mipmap-xhdpi", 96),
    IconSize("mipmap-xxhdpi", 144),
    IconSize("mipmap-xxxhdpi", 192),
)

_PORTRAIT_SPLASH = (
    ("drawable-ldpi", 320, 480),
    ("drawable-mdpi", 480, 800),
    ("drawable-hdpi", 720, 1280),
    ("drawable-xhdpi", 960, 1600),
    ("drawable-xxhdpi", 1440, 2560),
    ("drawable-xxxhdpi", 1920, 3840),
)

SPLASH_SIZES: tuple[SplashSize, ...] = tuple(
    SplashSize(folder, w, h, "portrait") for folder, w, h in _PORTRAIT_SPLASH
) + tuple(SplashSize(folder, h, w, "landscape") for folder, w, h in _PORTRAIT_SPLASH)


def contain_box(
    source: tuple[int, int], target: tuple[int, int], scale: float
) -> tuple[int, int, int, int]:
    """Size and centered offset of ``source`` fitted into ``scale`` of ``target``.

    Returns:
        (width, height, left, top)
    """
    src_w, src_h = source
    width, height = target
    factor = min(width * scale / src_w, height * scale / src_h)
    scaled_w = max(1, round(src_w * factor))
    scaled_h = max(1, round(src_h * factor))
    return scaled_w, scaled_h, round((width - scaled_w) / 2), round((height - scaled_h) / 2)


class ResourceProcessor(StructlogMixin):
    """Generate Android density-specific image resources.

    Image work is blocking and runs in a worker thread.
    """

    def __init__(
        self,
        background_color: str = "#ffffff",
        image_scale: float = 0.6,
    ) -> None:
        super().__init__()
        self.background_color = background_color
        self.image_scale = image_scale

    async def process_icon(self, icon_path: Path, res_dir: Path) -> list[Path]:
        return await asyncio.to_thread(self._write_icons, Path(icon_path), Path(res_dir))

    async def process_splash_screen(
        self, splash_path: Path, res_dir: Path
    ) -> list[Path]:
        return await asyncio.to_thread(
            self._write_splash_screens, Path(splash_path), Path(res_dir)
        )

    def _open(self, image_path: Path, kind: str) -> Image.Image:
        try:
            with Image.open(image_path) as image:
                if image.format not in SUPPORTED_FORMATS:
                    raise ResourceError(
                        f"Unsupported {kind} format: {image.format}",
                        {"input_path": str(image_path), "format": image.format},
                    )
                image.load()
                return image.convert("RGBA")
        except (OSError, UnidentifiedImageError) as e:
            raise ResourceError(
                f"Invalid {kind} file: {image_path}",
                {"input_path": str(image_path), "error": str(e)},
            ) from e

    def _save(self, image: Image.Image, output_path: Path, context: dict[str, object]) -> None:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            image.save(output_path, format="PNG", optimize=False, compress_level=6)
        except OSError as e:
            raise ResourceError(
                f"Failed to write {output_path.name}: {e}",
                {"output_path": str(output_path), **context},
            ) from e

    def _write_icons(self, icon_path: Path, res_dir: Path) -> list[Path]:
        source = self._open(icon_path, "icon")
        if source.width != source.height:
            self.logger.warning(
                "icon_not_square",
                input_path=str(icon_path),
                width=source.width,
                height=source.height,
            )

        written = []
        for entry in ICON_SIZES:
            # Cover the square, cropping from the center
            icon = ImageOps.fit(
                source, (entry.size, entry.size), Image.Resampling.LANCZOS
            )
            output_path = res_dir / entry.folder / ICON_FILENAME
            self._save(icon, output_path, {"size": entry.size})
            written.append(output_path)

        self.logger.info("icons_generated", count=len(written), res_dir=str(res_dir))
        return written

    def _write_splash_screens(self, splash_path: Path, res_dir: Path) -> list[Path]:
        source = self._open(splash_path, "splash screen")
        min_w, min_h = SPLASH_MIN_SIZE
        if source.width < min_w or source.height < min_h:
            self.logger.warning(
                "splash_smaller_than_recommended",
                input_path=str(splash_path),
                width=source.width,
                height=source.height,
            )

        written = []
        for entry in SPLASH_SIZES:
            width, height, left, top = contain_box(
                source.size, (entry.width, entry.height), self.image_scale
            )
            canvas = Image.new("RGBA", (entry.width, entry.height), self.background_color)
            resized = source.resize((width, height), Image.Resampling.LANCZOS)
            canvas.alpha_composite(resized, (left, top))

            output_path = res_dir / entry.folder / SPLASH_FILENAMES[entry.orientation]
            self._save(
                canvas,
                output_path,
                {"width": entry.width, "height": entry.height},
            )
            written.append(output_path)

        self.logger.info(
            "splash_screens_generated", count=len(written), res_dir=str(res_dir)
        )
        return written


def create_resource_processor() -> ResourceProcessor:
    """Factory function to create a ResourceProcessor instance."""
    return ResourceProcessor()


__all__ = [
    "ICON_FILENAME",
    "ICON_SIZES",
    "SPLASH_FILENAMES",
    "SPLASH_SIZES",
    "ResourceProcessor",
    "contain_box",
    "create_resource_processor",
]
