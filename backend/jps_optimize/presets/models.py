"""
Preset data model.

A Preset is pure data: a name, a description, a flat map of top-level
keys, and one level of named sections. Values are kept as the raw
strings found in the preset file; translation to target formats happens
in the applier.

Presets are built fresh from disk on every invocation and never cached.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Sections the engine knows how to apply
PHP_SECTION = "php"
LSCACHE_SECTION = "lscache"
KNOWN_SECTIONS = (PHP_SECTION, LSCACHE_SECTION)


class Preset(BaseModel):
    """
    A named bundle of desired settings.

    Attributes:
        name: Preset name from the file's `name:` key (non-empty)
        description: Optional human description
        settings: Flat top-level keys (includes name and description)
        sections: section name -> (key -> raw value)
        source_path: File the preset was parsed from, if any
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    name: str
    description: str = ""
    settings: Dict[str, str] = Field(default_factory=dict)
    sections: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    source_path: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Name must be non-empty."""
        if not v or not v.strip():
            raise ValueError("Preset name cannot be empty")
        return v.strip()

    def get(self, key_path: str) -> Optional[str]:
        """
        Resolve a dotted key path.

        "php.memory_limit" looks up key memory_limit in section php;
        "description" looks up a flat top-level key.

        Returns:
            The raw value, or None if the key is not present
        """
        if "." in key_path:
            section, key = key_path.split(".", 1)
            return self.sections.get(section, {}).get(key)
        return self.settings.get(key_path)

    def has_section(self, section: str) -> bool:
        return section in self.sections

    def section(self, section: str) -> Dict[str, str]:
        """Copy of a section's settings ({} if the section is absent)."""
        return dict(self.sections.get(section, {}))

    def list_keys(self, section: str) -> List[str]:
        """Keys of a section in file order."""
        return list(self.sections.get(section, {}))


def get_value(preset: Preset, key_path: str) -> Optional[str]:
    """Resolve a dotted key path against a preset (None if unresolved)."""
    return preset.get(key_path)
