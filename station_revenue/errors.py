"""Errors raised while reading a single settlement workbook."""


class SettlementParseError(ValueError):
    """A settlement file could not be parsed and should be skipped."""


class FilenameError(SettlementParseError):
    """Year and month could not be extracted from the file name."""


class MissingSheetError(SettlementParseError):
    """A required sheet is not present in the workbook."""


class SheetLayoutError(SettlementParseError):
    """A sheet does not have the expected fixed row layout."""
