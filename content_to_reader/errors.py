"""Domain exceptions raised by the content-to-reader pipeline."""


class ContentToReaderError(Exception):
    """Base class for every error the pipeline reports to the user."""


class ConfigurationError(ContentToReaderError):
    """Configuration file, output path or command options are invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class FetchError(ContentToReaderError):
    """One or more pages could not be fetched.

    ``failures`` maps every failing URL to its error message, in request order.
    """

    def __init__(self, failures: dict[str, str]):
        self.failures = dict(failures)
        super().__init__(
            "\n".join(f"{url} -> {message}" for url, message in self.failures.items())
        )


class ExtractionError(ContentToReaderError):
    """Article content could not be extracted from a page."""


class ValidationError(ContentToReaderError):
    """Extracted snippets failed static validation.

    ``errors`` maps every offending URL to its violation kinds.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = {url: list(kinds) for url, kinds in errors.items()}
        super().__init__(
            "\n".join(
                f"{url}: [{', '.join(kinds)}]" for url, kinds in self.errors.items()
            )
        )


class CommitError(ContentToReaderError):
    """A generated e-book could not be committed to its destination.

    Generated e-books are first saved in a temporary location; this error is
    raised when copying one out (e.g. to disk) fails.
    """


class LifecycleError(ContentToReaderError):
    """A ``ReaderFile`` was used after ``cleanup()``."""


class DeliveryError(ContentToReaderError):
    """The e-book could not be sent to the reader device."""
