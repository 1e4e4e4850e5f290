from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from .types import OnConflictPolicy

WORKBOOK_SUFFIXES = frozenset({".xlsx", ".xlsm", ".xls"})
_OUTPUT_TAG = "_shifted"


class PathPolicy(BaseModel):
    """Confines workbook reads and writes to one directory tree."""

    root: Path = Field(..., description="Directory workbook paths must stay under.")
    deny_globs: list[str] = Field(
        default_factory=list, description="Patterns refused even under root."
    )

    def check(self, path: Path) -> Path:
        """Resolve ``path`` against root and enforce the policy.

        Raises:
            ValueError: If the path leaves root or matches a denied pattern.
        """
        root = self.root.resolve()
        resolved = (root / path).resolve()
        if not resolved.is_relative_to(root):
            raise ValueError(f"Workbook path is outside root {root}: {resolved}")
        relative = resolved.relative_to(root)
        for pattern in self.deny_globs:
            if relative.match(pattern) or resolved.match(pattern):
                raise ValueError(
                    f"Workbook path {resolved} is denied by pattern {pattern!r}"
                )
        return resolved


class OutputPlan(BaseModel):
    """Where a run writes the edited workbook, and whether it writes at all."""

    path: Path
    warning: str | None = None
    skipped: bool = False


def resolve_workbook(path: Path, *, policy: PathPolicy | None = None) -> Path:
    """Resolve the workbook to edit and check that row ops can open it.

    Raises:
        FileNotFoundError: If the workbook does not exist.
        ValueError: If the path is not an Excel workbook or violates policy.
    """
    resolved = policy.check(path) if policy else path.resolve()
    if not resolved.exists():
        raise FileNotFoundError(f"Workbook not found: {resolved}")
    if not resolved.is_file():
        raise ValueError(f"Workbook path is not a file: {resolved}")
    if resolved.suffix.lower() not in WORKBOOK_SUFFIXES:
        raise ValueError(f"Unsupported file extension: {resolved.suffix}")
    return resolved


def plan_output(
    workbook: Path,
    *,
    out_dir: Path | None,
    out_name: str | None,
    on_conflict: OnConflictPolicy,
    policy: PathPolicy | None = None,
) -> OutputPlan:
    """Pick the output path for an edited copy of ``workbook``.

    An existing file is replaced under ``overwrite``, left alone under
    ``skip`` and avoided with a numbered sibling under ``rename``.
    """
    target = (out_dir or workbook.parent) / shifted_name(workbook, out_name)
    target = policy.check(target) if policy else target.resolve()
    if not target.exists() or on_conflict == "overwrite":
        return OutputPlan(path=target)
    if on_conflict == "skip":
        return OutputPlan(
            path=target,
            warning=f"Output exists; skipping write: {target.name}",
            skipped=True,
        )
    renamed = _free_sibling(target)
    return OutputPlan(
        path=renamed, warning=f"Output exists; renamed to: {renamed.name}"
    )


def shifted_name(workbook: Path, out_name: str | None) -> str:
    """File name of the edited copy.

    ``out_name`` wins (taking the workbook suffix when it has none); otherwise
    the copy is ``<stem>_shifted<suffix>``, never tagged twice.
    """
    if out_name:
        name = Path(out_name).name
        return name if Path(name).suffix else f"{name}{workbook.suffix}"
    stem = workbook.stem
    if not stem.casefold().endswith(_OUTPUT_TAG):
        stem = f"{stem}{_OUTPUT_TAG}"
    return f"{stem}{workbook.suffix}"


def _free_sibling(path: Path) -> Path:
    index = 1
    while True:
        candidate = path.with_name(f"{path.stem}_{index}{path.suffix}")
        if not candidate.exists():
            return candidate
        index += 1
