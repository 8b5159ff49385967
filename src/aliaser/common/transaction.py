from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union


class FileSystemAdapter(Protocol):
    def write_text(self, path: Path, content: str) -> None: ...
    def read_text(self, path: Path) -> str: ...


class RealFileSystem:
    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps CRLF files byte-for-byte
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)

    def read_text(self, path: Path) -> str:
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()


@dataclass
class FileOp(ABC):
    path: Path

    @abstractmethod
    def execute(self, fs: FileSystemAdapter, root: Path) -> None: ...


@dataclass
class WriteFileOp(FileOp):
    content: str

    def execute(self, fs: FileSystemAdapter, root: Path) -> None:
        fs.write_text(root / self.path, self.content)


class TransactionManager:
    def __init__(self, root_path: Path, fs: Optional[FileSystemAdapter] = None):
        self.root_path = root_path
        self.fs = fs or RealFileSystem()
        self._ops: List[WriteFileOp] = []
        # Latest staged content per path, relative to root_path
        self._staged: Dict[Path, str] = {}

    def _relative(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        if path.is_absolute():
            return path.relative_to(self.root_path)
        return path

    def add_write(self, path: Union[str, Path], content: str) -> None:
        rel_path = self._relative(path)
        self._ops.append(WriteFileOp(rel_path, content))
        self._staged[rel_path] = content

    def pending_content(self, path: Union[str, Path]) -> Optional[str]:
        return self._staged.get(self._relative(path))

    def read_text(self, path: Union[str, Path]) -> str:
        """Returns the staged content of a file, or its content on disk."""
        staged = self.pending_content(path)
        if staged is not None:
            return staged
        return self.fs.read_text(self.root_path / self._relative(path))

    def commit(self) -> None:
        for op in self._collapse(self._ops):
            op.execute(self.fs, self.root_path)
        self._ops.clear()
        self._staged.clear()

    def _collapse(self, ops: List[WriteFileOp]) -> List[WriteFileOp]:
        # Only the last write to a path survives, at the position of the first
        latest: Dict[Path, WriteFileOp] = {}
        for op in ops:
            latest[op.path] = op
        return list(latest.values())
