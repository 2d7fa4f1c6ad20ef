"""Render the GitHub ``CODEOWNERS`` file from the mapper registry."""

from __future__ import annotations

from pathlib import Path

from ownerscope.mapper import MapperRegistry

CODEOWNERS_HEADER = """\
# STOP! - DO NOT EDIT THIS FILE MANUALLY
# This file was automatically generated by "ownerscope validate".
#
# CODEOWNERS is used for GitHub to suggest code/file owners to various GitHub
# teams. This is useful when developers create Pull Requests since the
# code/file owner is notified. Reference GitHub docs for more details:
# https://docs.github.com/en/repositories/managing-your-repositorys-settings-and-features/customizing-your-repository/about-code-owners
"""


def codeowners_lines(registry: MapperRegistry) -> list[str]:
    lines: list[str] = []
    for mapper in registry:
        section: list[str] = []
        for association in mapper.owned_associations():
            team = association.team
            if team is None or team.github_team is None:
                continue
            section.append(f"/{association.label.lstrip('/')} {team.github_team}")
        if section:
            lines.append("")
            lines.append(f"# {mapper.description}")
            lines.extend(section)
    return lines


def codeowners_content(registry: MapperRegistry) -> str:
    lines = codeowners_lines(registry)
    if not lines:
        return ""
    return CODEOWNERS_HEADER + "\n".join(lines) + "\n"


def read_codeowners(path: Path) -> str | None:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def write_codeowners(path: Path, content: str) -> bool:
    """Write ``content`` if it differs from disk; ``True`` when the file changed."""
    if read_codeowners(path) == content:
        return False
    if not content:
        if path.exists():
            path.unlink()
            return True
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return True
