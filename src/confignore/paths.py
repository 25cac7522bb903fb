"""
Workspace folders and path normalization for ignore patterns
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union


def normalize_path(p: str) -> str:
    """
    Normalize a path or pattern for comparison.

    Backslashes become forward slashes and one leading ``./`` is removed.
    """
    normalized = p.replace('\\', '/')
    if normalized.startswith('./'):
        normalized = normalized[2:]
    return normalized


@dataclass(frozen=True)
class WorkspaceFolder:
    """A project root that owns configuration files"""
    root: Path
    name: str = ""

    @classmethod
    def from_path(cls, root: Union[str, Path], name: Optional[str] = None) -> "WorkspaceFolder":
        resolved = Path(root).resolve()
        return cls(root=resolved, name=name or resolved.name)

    @property
    def uri(self) -> str:
        """Workspace identity, used as cache key prefix"""
        return self.root.as_uri()


class Workspaces:
    """
    Ordered set of workspace folders
    """

    def __init__(self, roots: Iterable[Union[str, Path, WorkspaceFolder]] = ()):
        self._folders: List[WorkspaceFolder] = []
        for root in roots:
            self.add(root)

    def add(self, root: Union[str, Path, WorkspaceFolder]) -> WorkspaceFolder:
        folder = root if isinstance(root, WorkspaceFolder) else WorkspaceFolder.from_path(root)
        if folder not in self._folders:
            self._folders.append(folder)
        return folder

    def remove(self, root: Union[str, Path, WorkspaceFolder]) -> None:
        folder = root if isinstance(root, WorkspaceFolder) else WorkspaceFolder.from_path(root)
        self._folders = [f for f in self._folders if f != folder]

    @property
    def folders(self) -> List[WorkspaceFolder]:
        return list(self._folders)

    def __iter__(self):
        return iter(list(self._folders))

    def __len__(self) -> int:
        return len(self._folders)

    def get_workspace_folder(self, path: Union[str, Path]) -> Optional[WorkspaceFolder]:
        """
        Find the folder containing a path

        Args:
            path: File or folder path

        Returns:
            The deepest containing folder, or None if the path is outside every folder
        """
        target = Path(path).resolve()
        best: Optional[WorkspaceFolder] = None
        for folder in self._folders:
            if target == folder.root or folder.root in target.parents:
                if best is None or len(folder.root.parts) > len(best.root.parts):
                    best = folder
        return best


def get_workspace_relative_path(path: Union[str, Path],
                                folder: WorkspaceFolder) -> Optional[str]:
    """
    POSIX path of ``path`` relative to the folder root.

    Returns None for the root itself and for paths outside the folder.
    """
    target = Path(path).resolve()
    try:
        relative = target.relative_to(folder.root)
    except ValueError:
        return None
    rel = relative.as_posix()
    if rel in ('', '.'):
        return None
    return rel
