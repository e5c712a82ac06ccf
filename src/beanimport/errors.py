class BeanImportError(Exception):
    """Base class for every failure an import run can surface."""


class MissingFieldError(BeanImportError):
    def __init__(self, field: str, index: int, row: list[str]):
        self.field = field
        self.index = index
        self.row = row
        super().__init__(f"Can't get {field} from {row!r} with index {index}")


class RulesParseError(BeanImportError):
    pass


class AbortedError(BeanImportError):
    """The operator declined to edit newly discovered rules."""


class EditorError(BeanImportError):
    pass


class UnknownSourceError(BeanImportError):
    pass


class DecodeError(BeanImportError):
    """A file could not be decoded with the expected encoding."""
