"""Configuration schema definitions using dataclasses.

Raw entries keep the capacity string exactly as written; resolved entries
carry the exact byte count derived from it.
"""

from dataclasses import dataclass
from typing import Optional

from ..capacity import ParseError, parse_capacity


@dataclass(frozen=True)
class StorageEntry:
    """A disk farm with its capacity resolved to bytes.

    Attributes:
        directory: Path to the directory where plots are stored
        allocated_space_bytes: Bytes the farm may use, None for unbounded
    """

    directory: str
    allocated_space_bytes: Optional[int] = None


@dataclass(frozen=True)
class RawStorageEntry:
    """A disk farm as written in the configuration file.

    Attributes:
        directory: Path to the directory where plots are stored
        allocated_space: Capacity string (e.g., "1500G"), None for unbounded
    """

    directory: str
    allocated_space: Optional[str] = None

    def resolve(self) -> StorageEntry:
        """Parse the capacity string into a StorageEntry.

        Raises:
            ParseError: If the capacity string is malformed or too large
        """
        if self.allocated_space is None:
            return StorageEntry(directory=self.directory)

        try:
            num_bytes = parse_capacity(self.allocated_space)
        except ParseError as e:
            e.directory = self.directory
            raise
        return StorageEntry(directory=self.directory, allocated_space_bytes=num_bytes)


@dataclass(frozen=True)
class Config:
    """Root configuration object.

    Attributes:
        storage_entries: Disk farms in file order
        server_addresses: Plot server addresses ("host:port") in file order
    """

    storage_entries: tuple[RawStorageEntry, ...] = ()
    server_addresses: tuple[str, ...] = ()

    def resolve(self) -> list[StorageEntry]:
        """Resolve every storage entry, stopping at the first failure."""
        return [entry.resolve() for entry in self.storage_entries]

    def get_bounded_entries(self) -> list[RawStorageEntry]:
        """Get storage entries that carry a capacity limit."""
        return [e for e in self.storage_entries if e.allocated_space is not None]
