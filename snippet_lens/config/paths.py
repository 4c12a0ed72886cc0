from dataclasses import dataclass
from pathlib import Path


@dataclass
class SnippetLensPaths:
    """Centralizes filesystem paths for a Snippet Lens workspace."""

    root: Path

    @property
    def lens_dir(self) -> Path:
        return self.root / ".snippet-lens"

    @property
    def config_file(self) -> Path:
        return self.lens_dir / "config.json"

    @property
    def logs_dir(self) -> Path:
        return self.lens_dir / "logs"

    @property
    def global_dir(self) -> Path:
        return Path.home() / ".snippet-lens"

    @property
    def global_config_file(self) -> Path:
        return self.global_dir / "config.json"
