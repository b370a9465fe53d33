"""
Output Writer
=============

Materializes a compiled manifest and its staged assets as the output
directory. The directory is assembled next to its final location and swapped
in only once complete.
"""

import logging
import shutil
import tempfile
from pathlib import Path

from winefonts.core.exceptions import OutputWriteError
from winefonts.core.models import CompiledManifest

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes ``<output_dir>/<manifest_filename>`` plus every staged asset."""

    def __init__(self, output_dir: Path, manifest_filename: str = "fonts.json"):
        self.output_dir = Path(output_dir)
        self.manifest_filename = manifest_filename

    def write(self, manifest: CompiledManifest, staging_dir: Path) -> Path:
        """
        Replace the output directory with the manifest and staged assets.

        Args:
            manifest: Compiled manifest to serialize
            staging_dir: Directory holding assets already named by download id

        Returns:
            Path of the written manifest file
        """
        parent = self.output_dir.parent
        parent.mkdir(parents=True, exist_ok=True)
        temp_dir = Path(tempfile.mkdtemp(prefix=f".{self.output_dir.name}-", dir=parent))

        try:
            asset_count = 0
            for asset in sorted(Path(staging_dir).iterdir()):
                if asset.is_file():
                    shutil.copyfile(asset, temp_dir / asset.name)
                    asset_count += 1

            (temp_dir / self.manifest_filename).write_text(manifest.to_json(), encoding="utf-8")

            self._swap(temp_dir)
        except OSError as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise OutputWriteError(str(self.output_dir), str(e)) from e

        logger.info(f"Wrote {self.manifest_filename} and {asset_count} assets to {self.output_dir}")
        return self.output_dir / self.manifest_filename

    def _swap(self, new_dir: Path) -> None:
        """Move ``new_dir`` into place; the previous output is restored if that fails."""
        if not self.output_dir.exists():
            new_dir.rename(self.output_dir)
            return

        backup = new_dir.with_name(f"{new_dir.name}.previous")
        self.output_dir.rename(backup)
        try:
            new_dir.rename(self.output_dir)
        except OSError:
            backup.rename(self.output_dir)
            raise

        shutil.rmtree(backup, ignore_errors=True)
