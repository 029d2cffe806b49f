"""Shared test fixtures for monoscope tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path, PurePosixPath

import pytest
from dotenv import load_dotenv

from monoscope.config import MonoscopeConfig
from monoscope.workspace import Package, PackageName, Workspace

# Load .env from project root (doesn't override existing env vars)
load_dotenv(Path(__file__).parent.parent / ".env")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def sample_monoscope_yaml() -> str:
    """Sample monoscope.yaml content."""
    return """\
name: test-workspace
packages:
  - packages/*
"""


@pytest.fixture
def workspace_dir(temp_dir: Path, sample_monoscope_yaml: str) -> Path:
    """Create a sample workspace directory structure.

    pkg-c depends on pkg-b, which depends on pkg-a.
    """
    (temp_dir / "monoscope.yaml").write_text(sample_monoscope_yaml)
    (temp_dir / "README.md").write_text("# workspace\n")

    packages_dir = temp_dir / "packages"
    packages_dir.mkdir()

    for name, version, deps in [
        ("pkg-a", "1.0.0", []),
        ("pkg-b", "2.0.0", ["pkg-a"]),
        ("pkg-c", "0.1.0", ["pkg-b"]),
    ]:
        pkg = packages_dir / name
        module = pkg / "src" / name.replace("-", "_")
        module.mkdir(parents=True)
        deps_toml = ", ".join(f'"{d}"' for d in deps)
        (pkg / "pyproject.toml").write_text(
            f'[project]\nname = "{name}"\nversion = "{version}"\n'
            f'description = "Package {name}"\ndependencies = [{deps_toml}]\n'
        )
        (module / "__init__.py").write_text(f'__version__ = "{version}"\n')

    return temp_dir


@pytest.fixture
def git_workspace(workspace_dir: Path) -> Path:
    """Create a workspace with git initialized."""
    os.system(f"cd {workspace_dir} && git init -q")
    os.system(f"cd {workspace_dir} && git config user.email 'test@test.com'")
    os.system(f"cd {workspace_dir} && git config user.name 'Test'")
    os.system(f"cd {workspace_dir} && git add -A")
    os.system(f"cd {workspace_dir} && git commit -q -m 'Initial commit'")
    return workspace_dir


WorkspaceFactory = Callable[..., Workspace]


@pytest.fixture
def make_workspace(tmp_path: Path) -> WorkspaceFactory:
    """Build an in-memory workspace.

    Usage: ``make_workspace({"a": "packages/a"}, deps={"b": ["a"]})``.
    Directories are written with forward slashes and stored with the host
    separator, as discovery does.
    """

    def factory(
        dirs: dict[str, str],
        deps: dict[str, list[str]] | None = None,
        config: MonoscopeConfig | None = None,
    ) -> Workspace:
        deps = deps or {}
        packages = {}
        for name, directory in dirs.items():
            rel = Path(*PurePosixPath(directory).parts)
            packages[PackageName(name)] = Package(
                name=PackageName(name),
                path=tmp_path / rel,
                directory=str(rel),
                dependencies=frozenset(PackageName(d) for d in deps.get(name, [])),
            )
        return Workspace(tmp_path, config or MonoscopeConfig(name="test"), packages)

    return factory
