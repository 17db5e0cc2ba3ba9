"""Archive transformers.

The orchestrator only depends on the ArchiveTransformer protocol. AarTransformer
is the default implementation: it explodes an Android Archive into a directory
and reports its package name, jars and shared libraries.

Layout of an .aar file (a zip archive):
- AndroidManifest.xml   declares the package name
- classes.jar           compiled library classes
- libs/*.jar            bundled dependency jars
- jni/<abi>/*.so        shared libraries per ABI
- assets/**             raw assets
"""

from __future__ import annotations

import hashlib
import shutil
import zipfile
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from xml.etree import ElementTree

import structlog

from aar_transform.errors import TransformFailedError
from aar_transform.models import TransformRequest, TransformResult

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

MANIFEST_FILENAME = "AndroidManifest.xml"
CLASSES_JAR = "classes.jar"

logger = structlog.get_logger(__name__)


def exploded_dir_name(aar_path: Path | str) -> str:
    """Return the directory name an archive is exploded into.

    Archives with the same file name in different folders get different
    directories; the same input path always maps to the same directory.

    Example:
        >>> exploded_dir_name("modules/ti.map/lib/gms.aar")
        'gms-5d41402a'
    """
    path = Path(aar_path)
    path_digest = hashlib.sha256(str(path.resolve()).encode("utf-8")).hexdigest()[:8]
    return f"{path.stem}-{path_digest}"


@runtime_checkable
class ArchiveTransformer(Protocol):
    """Interface for anything that can transform a single archive.

    Implementations must report the same package name for identical archive
    bytes and must recreate the exploded directory when called again.

    Example implementation:
        >>> class StaticTransformer:
        ...     def transform(self, request: TransformRequest) -> TransformResult:
        ...         return TransformResult(
        ...             package_name="com.example.lib",
        ...             exploded_path=f"{request.output_path}/lib",
        ...         )
    """

    @abstractmethod
    def transform(self, request: TransformRequest) -> TransformResult:
        """Transform the archive described by ``request``.

        Raises:
            Exception: Any failure; the orchestrator aborts the run with it.
        """
        ...


class AarTransformer:
    """Explode Android Archives into the build's output directory.

    Example:
        >>> transformer = AarTransformer()
        >>> result = transformer.transform(
        ...     TransformRequest(aar_path="lib/gms.aar", output_path="build/exploded-aar")
        ... )
        >>> result.package_name
        'com.google.android.gms'
    """

    def __init__(self, log: BoundLogger | None = None) -> None:
        """Initialize the transformer.

        Args:
            log: Optional structlog logger. Uses the module logger if not provided.
        """
        self._log = log or logger

    def transform(self, request: TransformRequest) -> TransformResult:
        """Explode the archive and collect its contents.

        Args:
            request: Archive path, output base and optional copy destinations.

        Returns:
            Package name, exploded directory, jars and shared libraries.

        Raises:
            TransformFailedError: If the archive is invalid or lacks a manifest.
        """
        aar_path = Path(request.aar_path)
        exploded_path = Path(request.output_path) / exploded_dir_name(aar_path)

        self._log.debug("aar_explode_started", aar=str(aar_path), exploded_path=str(exploded_path))

        if exploded_path.exists():
            shutil.rmtree(exploded_path)
        exploded_path.mkdir(parents=True)

        self._extract(aar_path, exploded_path)
        package_name = self._read_package_name(aar_path, exploded_path)
        jars = self._collect_jars(exploded_path)
        native_libraries = self._collect_native_libraries(exploded_path)

        if request.assets_destination_path:
            self._copy_assets(exploded_path, Path(request.assets_destination_path))

        if request.shared_library_destination_path:
            self._copy_native_libraries(
                exploded_path,
                native_libraries,
                Path(request.shared_library_destination_path),
            )

        self._log.info(
            "aar_exploded",
            aar=str(aar_path),
            package_name=package_name,
            jars=len(jars),
            native_libraries=len(native_libraries),
        )

        return TransformResult(
            package_name=package_name,
            exploded_path=str(exploded_path),
            jars=[str(p) for p in jars],
            native_libraries=[str(p) for p in native_libraries],
        )

    def _extract(self, aar_path: Path, target: Path) -> None:
        """Extract every archive member below ``target``."""
        root = target.resolve()
        try:
            with zipfile.ZipFile(aar_path) as archive:
                for member in archive.namelist():
                    destination = (target / member).resolve()
                    if destination != root and root not in destination.parents:
                        raise TransformFailedError(
                            str(aar_path),
                            f"archive entry '{member}' escapes the output directory",
                        )
                archive.extractall(target)
        except zipfile.BadZipFile as e:
            raise TransformFailedError(str(aar_path), "not a valid archive") from e

    def _read_package_name(self, aar_path: Path, exploded_path: Path) -> str:
        manifest_path = exploded_path / MANIFEST_FILENAME
        if not manifest_path.exists():
            raise TransformFailedError(str(aar_path), f"missing {MANIFEST_FILENAME}")

        try:
            root = ElementTree.parse(manifest_path).getroot()
        except ElementTree.ParseError as e:
            raise TransformFailedError(str(aar_path), f"unreadable {MANIFEST_FILENAME}") from e

        package_name = root.get("package")
        if not package_name:
            raise TransformFailedError(
                str(aar_path), f"{MANIFEST_FILENAME} does not declare a package"
            )
        return package_name

    def _collect_jars(self, exploded_path: Path) -> list[Path]:
        jars: list[Path] = []
        classes_jar = exploded_path / CLASSES_JAR
        if classes_jar.is_file():
            jars.append(classes_jar)
        libs_dir = exploded_path / "libs"
        if libs_dir.is_dir():
            jars.extend(sorted(libs_dir.glob("*.jar")))
        return jars

    def _collect_native_libraries(self, exploded_path: Path) -> list[Path]:
        jni_dir = exploded_path / "jni"
        if not jni_dir.is_dir():
            return []
        return sorted(jni_dir.glob("*/*.so"))

    def _copy_assets(self, exploded_path: Path, destination: Path) -> None:
        assets_dir = exploded_path / "assets"
        if not assets_dir.is_dir():
            return
        shutil.copytree(assets_dir, destination, dirs_exist_ok=True)

    def _copy_native_libraries(
        self,
        exploded_path: Path,
        native_libraries: list[Path],
        destination: Path,
    ) -> None:
        # Keep the ABI directory of each library
        jni_dir = exploded_path / "jni"
        for library in native_libraries:
            target = destination / library.relative_to(jni_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(library, target)
