"""Data models for package selection and version resolution."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import Constants


def normalize_versions(names: List[Optional[str]], version: Any) -> List[Optional[str]]:
    """Turn a version attribute into a list index-aligned with ``names``.

    A list is used as given, None means no constraint for any name, and a
    scalar applies to a single package.
    """
    if isinstance(version, (list, tuple)):
        return list(version)
    if version is None:
        return [None for _ in names]
    return [version]


@dataclass
class PackageSpec:
    """Desired packages: names index-aligned with optional target versions."""
    names: List[Optional[str]]
    versions: List[Optional[str]] = field(default_factory=list)
    channel: str = Constants.DEFAULT_CHANNEL
    options: Dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None  # local .snap artifact, bypasses the store

    def __post_init__(self):
        if not self.versions:
            self.versions = [None for _ in self.names]
        if len(self.names) != len(self.versions):
            raise ValueError(
                f"{len(self.names)} package names but {len(self.versions)} versions"
            )

    @classmethod
    def build(
        cls,
        names: List[Optional[str]],
        version: Any = None,
        channel: str = Constants.DEFAULT_CHANNEL,
        options: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ) -> "PackageSpec":
        return cls(
            names=list(names),
            versions=normalize_versions(list(names), version),
            channel=channel,
            options=dict(options or {}),
            source=source,
        )

    def __len__(self) -> int:
        return len(self.names)

    def indices(self) -> List[int]:
        """Indices whose name is set."""
        return [i for i, name in enumerate(self.names) if name is not None]
