"""Exceptions raised while reading a binary star catalog.

File and header errors are fatal for the whole catalog. RecordDecodeError
only ever concerns a single record and is handled by the reader.
"""


class CatalogError(Exception):
    """Base class for everything the catalog reader can raise."""


class CatalogNotFoundError(CatalogError, FileNotFoundError):
    pass


class EmptyCatalogError(CatalogError):
    pass


class CatalogTooSmallError(CatalogError):
    """File is shorter than its header or its declared records."""


class MissingHeaderError(CatalogTooSmallError):
    pass


class TruncatedCatalogError(CatalogTooSmallError):
    def __init__(self, star_count: int, bytes_per_record: int, size: int, required: int):
        self.star_count = star_count
        self.bytes_per_record = bytes_per_record
        self.size = size
        self.required = required
        super().__init__(
            f"{star_count} stars of {bytes_per_record} bytes need {required} bytes, "
            f"file has {size}: file too short"
        )


class InvalidHeaderError(CatalogError):
    pass


class EpochMismatchError(CatalogError):
    pass


class NoMagnitudesError(CatalogError):
    pass


class RecordDecodeError(CatalogError):
    pass
