from __future__ import annotations

from pathlib import Path
from typing import Mapping

from ownerscope.mappers.package_ownership import ManifestOwnership
from ownerscope.rule_io import load_json_mapping

JS_PACKAGE_MANIFEST = "package.json"


class JsPackageOwnership(ManifestOwnership):
    """``metadata.owner`` in a JavaScript ``package.json``."""

    manifest_name = JS_PACKAGE_MANIFEST

    @property
    def description(self) -> str:
        return "Owner metadata key in package.json"

    def load_manifest(self, path: Path) -> Mapping[str, object]:
        return load_json_mapping(path)
