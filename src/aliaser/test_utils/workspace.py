import json
from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List, Optional

import tomli_w


class WorkspaceFactory:
    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files_to_create: List[Dict[str, Any]] = []

    def with_tsconfig(
        self,
        directory: str = ".",
        paths: Optional[Dict[str, List[str]]] = None,
        base_url: Optional[str] = ".",
        extends: Optional[Any] = None,
        filename: str = "tsconfig.json",
    ) -> "WorkspaceFactory":
        compiler_options: Dict[str, Any] = {}
        if base_url is not None:
            compiler_options["baseUrl"] = base_url
        if paths is not None:
            compiler_options["paths"] = paths

        data: Dict[str, Any] = {"compilerOptions": compiler_options}
        if extends is not None:
            data["extends"] = extends

        self._files_to_create.append(
            {"path": f"{directory}/{filename}", "content": data, "format": "json"}
        )
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append(
            {"path": path, "content": dedent(content), "format": "raw"}
        )
        return self

    def with_raw(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append({"path": path, "content": content, "format": "raw"})
        return self

    def with_gitignore(self, directory: str, content: str) -> "WorkspaceFactory":
        return self.with_source(f"{directory}/.gitignore", content)

    def with_node_package(self, directory: str, name: str) -> "WorkspaceFactory":
        manifest = {"name": name, "version": "1.0.0", "main": "index.js"}
        base = f"{directory}/node_modules/{name}"
        self._files_to_create.append(
            {"path": f"{base}/package.json", "content": manifest, "format": "json"}
        )
        return self.with_raw(f"{base}/index.js", "module.exports = {};\n")

    def with_settings(self, settings: Dict[str, Any]) -> "WorkspaceFactory":
        self._files_to_create.append(
            {"path": "aliaser.toml", "content": settings, "format": "toml"}
        )
        return self

    def build(self) -> Path:
        for file_spec in self._files_to_create:
            output_path = self.root_path / file_spec["path"]
            output_path.parent.mkdir(parents=True, exist_ok=True)

            content = file_spec["content"]
            fmt = file_spec["format"]

            if fmt == "toml":
                with output_path.open("wb") as f:
                    tomli_w.dump(content, f)
            elif fmt == "json":
                output_path.write_text(json.dumps(content, indent=2), encoding="utf-8")
            else:  # raw
                output_path.write_text(content, encoding="utf-8")

        return self.root_path
