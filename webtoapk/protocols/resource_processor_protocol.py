"""Protocol definition for icon and splash screen generation."""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ResourceProcessorProtocol(Protocol):
    """Protocol for generating Android image resources."""

    async def process_icon(self, icon_path: Path, res_dir: Path) -> list[Path]:
        """Generate launcher icons for every density.

        Returns:
            Paths of the written files

        Raises:
            ResourceError: If the image cannot be read or written
        """
        ...

    async def process_splash_screen(
        self, splash_path: Path, res_dir: Path
    ) -> list[Path]:
        """Generate portrait and landscape splash screens for every density.

        Returns:
            Paths of the written files

        Raises:
            ResourceError: If the image cannot be read or written
        """
        ...
