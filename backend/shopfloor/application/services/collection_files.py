"""Naming rules for collection files, shared by every maintenance service."""

from shopfloor.config import Settings


class CollectionFiles:
    """Decides which file names are collection files, and which are protected.

    A name is protected when its stem (text before the first dot) matches a
    protected collection, case-insensitively: ``application.db``,
    ``application.json`` and ``Application`` are all refused.
    """

    def __init__(self, settings: Settings):
        self.extension = settings.store_extension
        self.collections = tuple(settings.collections)
        self._protected = frozenset(name.casefold() for name in settings.protected_collections)

    def file_name(self, collection: str) -> str:
        return f"{collection}{self.extension}"

    def is_protected(self, file_name: str) -> bool:
        base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
        stem = base.split(".", 1)[0]
        return stem.casefold() in self._protected

    @staticmethod
    def is_plain_name(name: str) -> bool:
        """True for a single, visible path component (no separators, no ``..``)."""
        return (
            bool(name)
            and not name.startswith(".")
            and "/" not in name
            and "\\" not in name
            and "\x00" not in name
            and ":" not in name
        )

    def is_collection_file(self, name: str) -> bool:
        return self.is_plain_name(name) and name.endswith(self.extension)

    def unprotected_collections(self) -> list[str]:
        return [name for name in self.collections if not self.is_protected(name)]
