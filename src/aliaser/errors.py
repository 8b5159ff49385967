from pathlib import Path
from typing import Union


class AliaserError(Exception):
    pass


class ConfigParseError(AliaserError):
    def __init__(self, path: Union[str, Path], cause: Union[str, BaseException]):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to parse {self.path}: {cause}")


class OverlappingEditError(AliaserError):
    pass
