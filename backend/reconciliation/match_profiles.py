"""
Name Match Profiles

Central registry of how imported names are matched for each entity type.
Each profile has:
- Entity type (Patient or Professional)
- Display name
- Similarity threshold for fuzzy auto-correction
- Whether an unmatched name creates a new record

Supported Entities:
- PATIENT: matched against clients of existing appointments
- PROFESSIONAL: matched against the professional registry
"""

from enum import Enum
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from config import get_settings


class EntityType(str, Enum):
    """
    Entity types whose names are reconciled.

    The value is what appears in auto-corrections and validation errors.
    """
    PATIENT = "Patient"
    PROFESSIONAL = "Professional"


class NameMatchType(str, Enum):
    """
    Which matching rule produced a name match.
    """
    EXACT = "EXACT"         # Normalised names are equal
    CONTAINS = "CONTAINS"   # One name contains the other
    FUZZY = "FUZZY"         # Edit-distance similarity above threshold


@dataclass
class MatchProfile:
    """
    Matching configuration for one entity type.
    """
    entity: EntityType
    display_name: str
    similarity_threshold: float  # Score must be strictly greater to auto-correct
    create_when_unmatched: bool  # Unmatched names become new registry records

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": self.entity.value,
            "display_name": self.display_name,
            "similarity_threshold": self.similarity_threshold,
            "create_when_unmatched": self.create_when_unmatched
        }


class MatchProfileRegistry:
    """
    Registry of match profiles.

    Provides lookup methods for the name reconciler.
    """

    def __init__(self, default_threshold: Optional[float] = None):
        if default_threshold is None:
            default_threshold = get_settings().NAME_MATCH_THRESHOLD

        self._profiles: Dict[EntityType, MatchProfile] = {
            EntityType.PATIENT: MatchProfile(
                entity=EntityType.PATIENT,
                display_name="Patients",
                similarity_threshold=default_threshold,
                create_when_unmatched=False
            ),
            EntityType.PROFESSIONAL: MatchProfile(
                entity=EntityType.PROFESSIONAL,
                display_name="Professionals",
                similarity_threshold=default_threshold,
                create_when_unmatched=True
            ),
        }

    def get_profile(self, entity: EntityType) -> MatchProfile:
        """Get the profile for an entity type."""
        return self._profiles[entity]

    def get_all_profiles(self) -> List[MatchProfile]:
        """Get all profiles."""
        return list(self._profiles.values())

    def get_threshold(self, entity: EntityType) -> float:
        """Get the fuzzy-match threshold for an entity type."""
        return self._profiles[entity].similarity_threshold

    def update_profile(self, entity: EntityType, **kwargs):
        """Update the profile for an entity type."""
        profile = self._profiles[entity]
        for key, value in kwargs.items():
            if hasattr(profile, key):
                setattr(profile, key, value)

    def to_dict(self) -> Dict[str, Any]:
        """Export registry as dictionary."""
        return {
            entity.value: profile.to_dict()
            for entity, profile in self._profiles.items()
        }


# Global registry instance
match_profiles = MatchProfileRegistry()
