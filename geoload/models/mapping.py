# =============================================================================
# Rename Mapping Model
# =============================================================================
# Dataset-scoped oldName → newName field rename rules.
# =============================================================================

from typing import Dict, List, Tuple

from pydantic import BaseModel, Field, field_validator

__all__ = ["RenameMapping"]


class RenameMapping(BaseModel):
    """
    Field rename rules for one dataset.

    Attributes:
        dataset_id: Dataset identifier the rules were looked up for
        pairs: Ordered (old_name, new_name) pairs; old names are unique

    Example:
        >>> mapping = RenameMapping(dataset_id="parcels", pairs=[("blockid", "block_id")])
        >>> mapping.as_dict()
        {'blockid': 'block_id'}
    """

    dataset_id: str = Field(..., description="Dataset identifier")
    pairs: List[Tuple[str, str]] = Field(default_factory=list)

    @field_validator("pairs")
    @classmethod
    def validate_unique_old_names(cls, v: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        """Reject blank names and duplicate old names."""
        seen = set()
        for old_name, new_name in v:
            if not old_name or not new_name:
                raise ValueError(f"Rename pair has a blank name: ({old_name!r}, {new_name!r})")
            if old_name in seen:
                raise ValueError(f"Duplicate old field name in rename mapping: {old_name}")
            seen.add(old_name)
        return v

    @classmethod
    def empty(cls, dataset_id: str) -> "RenameMapping":
        return cls(dataset_id=dataset_id, pairs=[])

    @property
    def is_empty(self) -> bool:
        return not self.pairs

    def as_dict(self) -> Dict[str, str]:
        return dict(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)
