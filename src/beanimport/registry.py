from beanimport.models import ImporterInfo


class ImporterRegistry:
    def __init__(self):
        self._importers: dict[str, ImporterInfo] = {}

    def register(self, info: ImporterInfo) -> None:
        self._importers[info.key] = info

    def get_by_key(self, key: str) -> ImporterInfo | None:
        return self._importers.get(key)

    def keys(self) -> list[str]:
        return list(self._importers)

    def list_all(self) -> list[ImporterInfo]:
        return list(self._importers.values())


registry = ImporterRegistry()
