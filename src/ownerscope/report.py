from __future__ import annotations

from ownerscope.mapper import MapperRegistry
from ownerscope.teams import Team

EMPTY_SECTION_TEXT = "This team owns nothing in this category."


def report_for_team(registry: MapperRegistry, team: Team) -> str:
    """Markdown listing of everything ``team`` owns, one section per mapper."""
    lines = [f"# Code Ownership Report for `{team.name}` Team"]
    for mapper in registry:
        lines.append(f"## {mapper.description}")
        owned = [
            f"- {association.label}"
            for association in mapper.owned_associations()
            if association.team is not None and association.team.name == team.name
        ]
        if owned:
            lines.extend(owned)
        else:
            lines.append(EMPTY_SECTION_TEXT)
        lines.append("")
    return "\n".join(lines)
