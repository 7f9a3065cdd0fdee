class CsvEditorError(Exception):
    pass


class RecordNotFound(CsvEditorError):
    def __init__(self, identity: str):
        super().__init__(f"Record not found: {identity}")
        self.identity = identity


class NoDocumentLoaded(CsvEditorError):
    def __init__(self):
        super().__init__("No CSV document is loaded")


class UnsupportedFile(CsvEditorError):
    pass


class UploadTooLarge(CsvEditorError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"Upload is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit


class UnknownColumn(CsvEditorError):
    def __init__(self, column: str):
        super().__init__(f"Unknown column: {column}")
        self.column = column
