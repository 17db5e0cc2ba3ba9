"""Shared pytest fixtures for aar-transform tests.

Provides structlog configuration, archive builders and a counting
transformer stub.
"""

from __future__ import annotations

import sys
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from aar_transform.models import (
    BuildContext,
    OriginType,
    TaskRef,
    TransformRequest,
    TransformResult,
)
from aar_transform.settings import AarTransformSettings
from aar_transform.transformer import exploded_dir_name

MANIFEST_TEMPLATE = (
    '<?xml version="1.0" encoding="utf-8"?>\n'
    '<manifest xmlns:android="http://schemas.android.com/apk/res/android" '
    'package="{package}">\n'
    "</manifest>\n"
)


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def isolate_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep AAR_TRANSFORM_* variables of the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("AAR_TRANSFORM_"):
            monkeypatch.delenv(key)


def write_aar(
    path: Path,
    package: str,
    *,
    classes: bytes = b"classes",
    libs: dict[str, bytes] | None = None,
    jni: dict[str, bytes] | None = None,
    assets: dict[str, bytes] | None = None,
    manifest: str | None = None,
) -> Path:
    """Write a minimal Android Archive to ``path``.

    Args:
        path: Target file.
        package: Package name declared in the manifest.
        classes: Contents of classes.jar.
        libs: Extra jars below libs/, by file name.
        jni: Shared libraries below jni/, by "<abi>/<name>.so".
        assets: Files below assets/, by relative path.
        manifest: Raw manifest overriding the generated one.

    Returns:
        ``path``.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(
            "AndroidManifest.xml",
            manifest if manifest is not None else MANIFEST_TEMPLATE.format(package=package),
        )
        archive.writestr("classes.jar", classes)
        for name, content in (libs or {}).items():
            archive.writestr(f"libs/{name}", content)
        for name, content in (jni or {}).items():
            archive.writestr(f"jni/{name}", content)
        for name, content in (assets or {}).items():
            archive.writestr(f"assets/{name}", content)
    return path


class CountingTransformer:
    """Transformer stub that records every invocation.

    Package names come from ``packages`` (keyed by archive file name) or
    default to ``com.example.<stem>``. The exploded directory is created so
    that cached records stay reusable.
    """

    def __init__(
        self,
        packages: dict[str, str] | None = None,
        fail_for: set[str] | None = None,
    ) -> None:
        self.packages = packages or {}
        self.fail_for = fail_for or set()
        self.requests: list[TransformRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def transform(self, request: TransformRequest) -> TransformResult:
        self.requests.append(request)
        aar_path = Path(request.aar_path)
        if aar_path.name in self.fail_for:
            raise RuntimeError(f"cannot explode {aar_path.name}")

        exploded_path = Path(request.output_path) / exploded_dir_name(aar_path)
        exploded_path.mkdir(parents=True, exist_ok=True)
        jar = exploded_path / "classes.jar"
        jar.write_bytes(b"classes")

        return TransformResult(
            package_name=self.packages.get(aar_path.name, f"com.example.{aar_path.stem}"),
            exploded_path=str(exploded_path),
            jars=[str(jar)],
            native_libraries=[],
        )


@pytest.fixture
def make_aar(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing archives below tmp_path/inputs."""

    def _make(name: str, package: str = "com.example.lib", **kwargs: object) -> Path:
        return write_aar(tmp_path / "inputs" / name, package, **kwargs)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def make_task(make_aar: Callable[..., Path]) -> Callable[..., TaskRef]:
    """Factory fixture writing an archive and returning a Project task for it."""

    def _make(
        name: str,
        content: bytes | None = None,
        origin_type: OriginType = OriginType.PROJECT,
        module_id: str | None = None,
    ) -> TaskRef:
        path = make_aar(name, classes=content if content is not None else name.encode())
        return TaskRef(input_path=str(path), origin_type=origin_type, module_id=module_id)

    return _make


@pytest.fixture
def build_context(tmp_path: Path) -> BuildContext:
    """Build context with intermediates, assets and jni dirs below tmp_path."""
    return BuildContext(
        build_intermediates_dir=str(tmp_path / "build" / "intermediates"),
        assets_destination_path=str(tmp_path / "build" / "assets"),
        shared_library_destination_path=str(tmp_path / "build" / "jni"),
    )


@pytest.fixture
def settings() -> AarTransformSettings:
    """Default settings without reading a .env file."""
    return AarTransformSettings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def transformer() -> CountingTransformer:
    return CountingTransformer()


@pytest.fixture
def make_transformer() -> Callable[..., CountingTransformer]:
    """Factory fixture for transformer stubs with custom packages or failures."""
    return CountingTransformer


@pytest.fixture
def cli_runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Click test runner working inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def write_archive() -> Callable[..., Path]:
    """Archive writer for tests that need archives outside tmp_path/inputs."""
    return write_aar
