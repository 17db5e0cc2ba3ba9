"""Discover Android Libraries in projects and modules.

This module handles building the ordered task list for a build:
- scan_project: Archives in each module's lib folder, then platform/android
- scan_module: Archives in a module's own lib folder
- load_module_manifest: Read the modules used by a project from YAML

Directory listings are sorted by file name so task order, and with it the
winner of any duplicate or conflict, is the same on every platform.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from aar_transform.errors import ConfigurationError
from aar_transform.models import ModuleInfo, OriginType, TaskRef

logger = structlog.get_logger(__name__)

AAR_SUFFIX = ".aar"


def _list_archives(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == AAR_SUFFIX),
        key=lambda p: p.name,
    )


def scan_project(project_dir: Path | str, modules: Iterable[ModuleInfo] = ()) -> list[TaskRef]:
    """Collect the archives used by an application project.

    Args:
        project_dir: Project root directory.
        modules: Native modules used by the project, in declared order.

    Returns:
        Tasks for module archives first, then project archives.

    Example:
        >>> tasks = scan_project("app", [ModuleInfo(id="ti.map", path="modules/ti.map")])
        >>> [t.origin_type.value for t in tasks]
        ['Module', 'Project']
    """
    tasks: list[TaskRef] = []

    for module in modules:
        for archive in _list_archives(Path(module.path) / "lib"):
            tasks.append(
                TaskRef(
                    input_path=str(archive),
                    origin_type=OriginType.MODULE,
                    module_id=module.id,
                )
            )

    platform_dir = Path(project_dir) / "platform" / "android"
    for archive in _list_archives(platform_dir):
        tasks.append(TaskRef(input_path=str(archive), origin_type=OriginType.PROJECT))

    logger.debug("project_scanned", project_dir=str(project_dir), archives=len(tasks))
    return tasks


def scan_module(lib_dir: Path | str) -> list[TaskRef]:
    """Collect the archives in a module's lib folder.

    Args:
        lib_dir: The module's lib directory.

    Returns:
        One Project-origin task per archive.
    """
    tasks = [
        TaskRef(input_path=str(archive), origin_type=OriginType.PROJECT)
        for archive in _list_archives(Path(lib_dir))
    ]
    logger.debug("module_scanned", lib_dir=str(lib_dir), archives=len(tasks))
    return tasks


def load_module_manifest(path: Path | str) -> list[ModuleInfo]:
    """Load the modules used by a project from a YAML manifest.

    Expected format::

        modules:
          - id: ti.map
            path: modules/android/ti.map/5.0.0

    Relative module paths are resolved against the manifest's directory.

    Args:
        path: Manifest file.

    Returns:
        Modules in declared order.

    Raises:
        ConfigurationError: If the file is missing, not valid YAML or has the
            wrong shape.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError("Module manifest not found", file_path=str(path))

    try:
        raw: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Invalid YAML in module manifest",
            file_path=str(path),
            internal_details=str(e),
        ) from e

    if not isinstance(raw, dict) or not isinstance(raw.get("modules", []), list):
        raise ConfigurationError(
            "Module manifest must contain a 'modules' list",
            file_path=str(path),
        )

    modules: list[ModuleInfo] = []
    for entry in raw.get("modules", []):
        try:
            module = ModuleInfo.model_validate(entry)
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid module entry in module manifest",
                file_path=str(path),
                internal_details=str(e),
            ) from e
        module_path = Path(module.path)
        if not module_path.is_absolute():
            module = ModuleInfo(id=module.id, path=str(path.parent / module_path))
        modules.append(module)

    return modules
