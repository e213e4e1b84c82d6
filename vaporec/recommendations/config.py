from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Where the bundled vaporizer catalog lives.

    ``VAPOREC_CATALOG_CSV`` overrides the whole path.
    """

    data_dir: Path = _DATA_DIR
    catalog_filename: str = "vaporizers.csv"
    override_path: str = os.getenv("VAPOREC_CATALOG_CSV", "")

    @property
    def catalog_path(self) -> Path:
        if self.override_path:
            return Path(self.override_path)
        return self.data_dir / self.catalog_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
