"""Data models for import scanning."""

from pathlib import Path

from pydantic import BaseModel
from pydantic import Field
from pydantic import computed_field


class ResolvedImport(BaseModel):
    """One discovered import and the directory it resolves to.

    Attributes:
        token: Import token, e.g. "2#QtQuick/Controls"
        path: Absolute module directory, None when the token is malformed
    """

    token: str
    path: Path | None


class SkippedDirectory(BaseModel):
    """A directory the walk could not enter.

    Attributes:
        path: Directory that was skipped
        reason: OS error text, or "max depth"
    """

    path: Path
    reason: str


class ScanResult(BaseModel):
    """Outcome of one project scan.

    Attributes:
        resolved: Every discovered import, in discovery order
        skipped: Directories that could not be walked (QML root subtrees,
            missing or unreadable module directories, depth-limited ones)
    """

    resolved: list[ResolvedImport] = Field(default_factory=list)
    skipped: list[SkippedDirectory] = Field(default_factory=list)

    @computed_field
    @property
    def imports(self) -> list[str]:
        return [item.token for item in self.resolved]

    @computed_field
    @property
    def paths(self) -> list[Path]:
        """Resolved module directories, unresolvable tokens left out."""
        return [item.path for item in self.resolved if item.path is not None]
