class LineReaderError(Exception):
    def __init__(self, code, message, data=None):
        self.code = code
        self.message = str(message)
        self.data = data
        super().__init__(self.message)

    def __eq__(self, other):
        if not isinstance(other, LineReaderError):
            return NotImplemented
        return self.code == other.code and self.message == other.message and self.data == other.data

    __hash__ = Exception.__hash__

    def __repr__(self):
        return "{}(code={}, message={!r})".format(type(self).__name__, self.code, self.message)


class UnknownError(LineReaderError):
    def __init__(self, message="Unknown error", data=None):
        super().__init__(0, message, data)


class SourceError(LineReaderError):
    """Base for failures of the underlying byte source.

    Raising one of these aborts the current line retrieval; whatever was
    buffered before the failure stays buffered, so the call may be retried.
    """
    def __init__(self, message="Source error", data=None, code=1):
        super().__init__(code, message, data)


class SourceReadError(SourceError):
    def __init__(self, message="Source read failed", data=None):
        super().__init__(message, data, 2)


class SourceTimeout(SourceError):
    def __init__(self, message="Source timed out", data=None):
        super().__init__(message, data, 3)


class SourceClosed(SourceError):
    def __init__(self, message="Source closed", data=None):
        super().__init__(message, data, 4)


class SourceUnavailable(SourceError):
    def __init__(self, message="Source not available", data=None):
        super().__init__(message, data, 5)


class NetworkError(SourceError):
    def __init__(self, message="Network error", data=None):
        super().__init__(message, data, 6)


class BackendError(SourceError):
    def __init__(self, message="Backend error", data=None):
        super().__init__(message, data, 7)


class SourceNotSupported(LineReaderError):
    def __init__(self, message="Source not supported", data=None):
        super().__init__(100, message, data)
