"""Configuration schema for monoscope.yaml."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MonoscopeConfig(BaseModel):
    """Root configuration loaded from monoscope.yaml.

    Attributes:
        name: Workspace name.
        packages: Glob patterns (relative to the workspace root) locating
            package directories.
        ignore: Globs of changed files to ignore during change detection.
        global_deps: Globs of files whose change affects every package.
        infer_filter_root: Default workspace-relative directory for package
            inference when --infer-filter-root is not given.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    packages: list[str] = Field(default_factory=lambda: ["packages/*"])
    ignore: list[str] = Field(default_factory=list)
    global_deps: list[str] = Field(default_factory=list)
    infer_filter_root: str = ""

    @field_validator("packages")
    @classmethod
    def _packages_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one package glob is required")
        return value
