# src/gameblocker/errors.py
"""Error kinds raised by the store and export orchestration.

Routes map these onto HTTP status codes; the script generator itself never
raises them.
"""


class BlocklistError(Exception):
    """Base class for blocklist/export failures."""


class NotFoundError(BlocklistError):
    pass


class WebsiteNotFoundError(NotFoundError):
    pass


class ProgramNotFoundError(NotFoundError):
    pass


class HistoryEntryNotFoundError(NotFoundError):
    pass


class ArtifactNotFoundError(NotFoundError):
    pass


class ValidationError(BlocklistError):
    pass


class InvalidWebsiteError(ValidationError):
    pass


class InvalidProgramError(ValidationError):
    pass


class InvalidArtifactNameError(ValidationError):
    pass


class DuplicateWebsiteError(BlocklistError):
    pass


class ExportFailedError(BlocklistError):
    """Writing the generated scripts to the exports directory failed."""
