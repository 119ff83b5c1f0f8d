"""
Adventure loader - Load and validate YAML adventure files
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from delve.config import get_adventures_dir
from delve.engine.errors import ContentError
from delve.models.adventure import AdventureContent

logger = logging.getLogger(__name__)


class AdventureLoader:
    """Loads adventures from <adventures_dir>/<adventure_id>.yaml"""

    def __init__(self, adventures_dir: str | Path | None = None):
        """Initialize with adventures directory path"""
        if adventures_dir is None:
            adventures_dir = get_adventures_dir()
        self.adventures_dir = Path(adventures_dir)

    def list_adventures(self) -> list[dict]:
        """List available adventures with metadata"""
        adventures = []

        if not self.adventures_dir.exists():
            return adventures

        for path in sorted(self.adventures_dir.glob("*.yaml")):
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.warning(f"Skipping unreadable adventure {path.name}: {e}")
                continue
            adventures.append({
                "id": path.stem,
                "title": data.get("title", path.stem),
            })

        return adventures

    def load_adventure(self, adventure_id: str) -> AdventureContent:
        """
        Load and validate an adventure.

        Args:
            adventure_id: The adventure identifier (file stem in adventures/)

        Returns:
            Validated AdventureContent

        Raises:
            FileNotFoundError: If the adventure doesn't exist
            ContentError: If the file is malformed or references unknown ids
        """
        path = self.adventures_dir / f"{adventure_id}.yaml"

        if not path.exists():
            raise FileNotFoundError(f"Adventure '{adventure_id}' not found at {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            content = AdventureContent.model_validate(data)
        except (yaml.YAMLError, ValidationError) as e:
            raise ContentError(f"Adventure '{adventure_id}' is malformed: {e}") from e

        errors = validate_adventure(content)
        if errors:
            error_list = "\n  - ".join(errors)
            raise ContentError(
                f"Adventure '{adventure_id}' validation failed with {len(errors)} error(s):\n  - {error_list}"
            )

        logger.info(f"Loaded adventure '{adventure_id}': {content.title}")
        return content


def validate_adventure(content: AdventureContent) -> list[str]:
    """Check cross references between beats, choices and encounters."""
    errors = []
    beat_ids = [beat.id for beat in content.beats]

    duplicates = sorted({beat_id for beat_id in beat_ids if beat_ids.count(beat_id) > 1})
    for beat_id in duplicates:
        errors.append(f"Duplicate beat id '{beat_id}'")

    if content.opening not in beat_ids:
        errors.append(f"Opening beat '{content.opening}' does not exist")

    all_choices = [(beat.id, choice) for beat in content.beats for choice in beat.choices]
    all_choices += [("global", choice) for choice in content.global_choices]

    for source, choice in all_choices:
        if choice.goto is not None and choice.goto not in beat_ids:
            errors.append(f"Choice '{choice.label}' in '{source}' goes to unknown beat '{choice.goto}'")
        if choice.encounter is not None and choice.encounter not in content.encounters:
            errors.append(
                f"Choice '{choice.label}' in '{source}' starts unknown encounter '{choice.encounter}'"
            )

    for encounter_id, encounter in content.encounters.items():
        if not encounter.enemies:
            errors.append(f"Encounter '{encounter_id}' has no enemies")

    return errors
