"""Artifact descriptors handed to the kernel by discovery."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from droidport.codes import ArtifactKind, Origin


SKILL_MAIN_FILES = ("skill.md", "skill.mdx")


class Artifact(BaseModel):
    """A single agent or command file.

    `content` is optional: when discovery already holds the text it is used
    directly, otherwise the analyzer asks the fetch collaborator for it.
    """
    name: str
    src: str  # Local path or remote URL
    origin: Origin = Origin.LOCAL
    kind: ArtifactKind = ArtifactKind.AGENT
    content: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class SkillFile(BaseModel):
    """One file inside a skill directory."""
    relative_path: str
    src: str
    origin: Origin = Origin.LOCAL
    content: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class SkillArtifact(BaseModel):
    """A skill directory: a main SKILL.md plus supporting files."""
    name: str
    src_dir: str
    origin: Origin = Origin.LOCAL
    files: List[SkillFile] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def main_file(self) -> Optional[SkillFile]:
        """Return the SKILL.md / SKILL.mdx entry, if any."""
        for skill_file in self.files:
            if is_skill_main_file(skill_file.relative_path):
                return skill_file
        return None


class PluginArtifacts(BaseModel):
    """All artifacts discovered for one plugin."""
    name: str
    description: str = ""
    agents: List[Artifact] = Field(default_factory=list)
    commands: List[Artifact] = Field(default_factory=list)
    skills: List[SkillArtifact] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def is_skill_main_file(filename: str) -> bool:
    """True for SKILL.md / SKILL.mdx in any letter case."""
    return filename.lower() in SKILL_MAIN_FILES
