from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class ForFileResponseDTO(BaseModel):
    path: str
    team_name: str = "Unowned"
    team_yml: str = "Unowned"
    github_team: Optional[str] = None


class OwnedFrameDTO(BaseModel):
    file: str
    team_name: str


class ValidationResponseDTO(BaseModel):
    ok: bool
    errors: List[str] = []
    unowned_files: List[str] = []
