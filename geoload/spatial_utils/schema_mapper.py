# =============================================================================
# Schema Mapper - Dataset to Field Rename Mapping
# =============================================================================
# Resolves the field rename rules for a dataset from an external mapping
# source (one sheet per dataset, oldFieldName / newFieldName columns).
# =============================================================================

import logging
from typing import Dict, List, Optional, Protocol, Set, Tuple

import pandas as pd

from geoload.errors import SchemaLookupError
from geoload.models import RenameMapping

__all__ = [
    "RenameMappingProvider",
    "ExcelRenameProvider",
    "StaticRenameProvider",
    "SchemaMapper",
    "OLD_FIELD_HEADER",
    "NEW_FIELD_HEADER",
]

logger = logging.getLogger(__name__)

OLD_FIELD_HEADER = "oldFieldName"
NEW_FIELD_HEADER = "newFieldName"


class RenameMappingProvider(Protocol):
    """Source of per-dataset rename pairs."""

    def sheet_names(self) -> Set[str]:
        ...

    def pairs_for(self, sheet_name: str) -> List[Tuple[str, str]]:
        ...


class ExcelRenameProvider:
    """
    Rename mapping source backed by an Excel workbook.

    Each sheet is named after a dataset and has a header row containing
    ``oldFieldName`` and ``newFieldName``. Rows with a blank old or new name
    are skipped.

    Args:
        path: Path to the .xlsx workbook

    Raises:
        SchemaLookupError: From either method if the workbook cannot be read
    """

    def __init__(self, path: str):
        self.path = path

    def sheet_names(self) -> Set[str]:
        try:
            with pd.ExcelFile(self.path, engine="openpyxl") as workbook:
                return set(workbook.sheet_names)
        except Exception as e:
            raise SchemaLookupError(f"Error reading schema mapper file {self.path}: {e}") from e

    def pairs_for(self, sheet_name: str) -> List[Tuple[str, str]]:
        try:
            frame = pd.read_excel(
                self.path, sheet_name=sheet_name, dtype=str, engine="openpyxl"
            )
        except Exception as e:
            raise SchemaLookupError(
                f"Error loading rename mapping from sheet {sheet_name}: {e}"
            ) from e

        if OLD_FIELD_HEADER not in frame.columns or NEW_FIELD_HEADER not in frame.columns:
            logger.warning(
                f"Sheet {sheet_name} is missing '{OLD_FIELD_HEADER}'/'{NEW_FIELD_HEADER}' columns"
            )
            return []

        pairs = []
        for old_name, new_name in zip(frame[OLD_FIELD_HEADER], frame[NEW_FIELD_HEADER]):
            if pd.isna(old_name) or pd.isna(new_name):
                continue
            old_name, new_name = str(old_name).strip(), str(new_name).strip()
            if old_name and new_name:
                pairs.append((old_name, new_name))
        return pairs


class StaticRenameProvider:
    """In-memory rename mapping source: sheet name → list of pairs."""

    def __init__(self, sheets: Optional[Dict[str, List[Tuple[str, str]]]] = None):
        self.sheets = dict(sheets or {})

    def sheet_names(self) -> Set[str]:
        return set(self.sheets)

    def pairs_for(self, sheet_name: str) -> List[Tuple[str, str]]:
        return list(self.sheets.get(sheet_name, []))


class SchemaMapper:
    """
    Looks up the RenameMapping for a dataset.

    Sheet names are read once, by ``preload`` or on first use. If the
    provider cannot list its sheets the failure is logged and the mapper
    behaves as if no sheets exist for the rest of the run. Matching of dataset id to sheet name is a
    case-insensitive exact match. Results are cached per dataset id.

    Example:
        >>> mapper = SchemaMapper(StaticRenameProvider({"Parcels": [("blockid", "block_id")]}))
        >>> mapper.lookup("parcels").as_dict()
        {'blockid': 'block_id'}
    """

    def __init__(self, provider: Optional[RenameMappingProvider], log=None):
        self.provider = provider
        self.log = log or logger
        self._sheets: Optional[Dict[str, str]] = None
        self._cache: Dict[str, RenameMapping] = {}

    def _load_sheets(self) -> Dict[str, str]:
        if self._sheets is not None:
            return self._sheets

        self._sheets = {}
        if self.provider is None:
            self.log.warning("No schema mapper source configured; fields will not be renamed")
            return self._sheets

        try:
            names = self.provider.sheet_names()
        except SchemaLookupError as e:
            self.log.error(f"{e}. Continuing without field renaming.")
            return self._sheets

        for name in names:
            self._sheets.setdefault(name.casefold(), name)
        self.log.info(f"Loaded schema mapper with sheets: {', '.join(sorted(names))}")
        return self._sheets

    def preload(self) -> Set[str]:
        """Read the sheet names now so an unreadable source is reported up front."""
        return self.sheet_names

    @property
    def sheet_names(self) -> Set[str]:
        return set(self._load_sheets().values())

    def match_sheet(self, dataset_id: str) -> Optional[str]:
        """Return the sheet matching ``dataset_id`` (case-insensitive), if any."""
        return self._load_sheets().get(dataset_id.casefold())

    def lookup(self, dataset_id: str) -> RenameMapping:
        """
        Return the rename mapping for a dataset.

        Args:
            dataset_id: File base name without extension

        Returns:
            RenameMapping; empty if no sheet matches or the sheet is unreadable
        """
        key = dataset_id.casefold()
        if key in self._cache:
            return self._cache[key]

        sheet = self.match_sheet(dataset_id)
        if sheet is None:
            self.log.info(f" - No matching schema sheet for {dataset_id}. Skipping renaming.")
            mapping = RenameMapping.empty(dataset_id)
        else:
            self.log.info(f" - Found matching schema sheet: {sheet}")
            try:
                pairs = self.provider.pairs_for(sheet)
            except SchemaLookupError as e:
                self.log.error(f"{e}. Skipping renaming for {dataset_id}.")
                pairs = []
            # Later rows win for a repeated old name
            collapsed = {old: new for old, new in pairs if old and new}
            mapping = RenameMapping(dataset_id=dataset_id, pairs=list(collapsed.items()))

        self._cache[key] = mapping
        return mapping
