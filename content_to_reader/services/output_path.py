"""Output path sanitization for generated e-books."""

from pathlib import PurePath

from content_to_reader.constants import EPUB_EXTENSION
from content_to_reader.errors import ConfigurationError


def sanitize_output_path(output: str, default_extension: str = EPUB_EXTENSION) -> str:
    """Enforce the rules on which ``output`` paths are accepted.

    Args:
        output: Filename or path provided by the user
        default_extension: Extension appended when ``output`` has none

    Returns:
        Path with a lowercased ``.epub`` extension

    Raises:
        ConfigurationError: If the path is empty or has another extension
    """
    if not output or not output.strip():
        raise ConfigurationError("Output path can't be empty.")

    path = PurePath(output.strip())
    if not path.name:
        raise ConfigurationError(f"Output path {output!r} doesn't name a file.")

    suffix = path.suffix.lower()
    if suffix and suffix != EPUB_EXTENSION:
        raise ConfigurationError(
            "Only `.epub` extension is accepted. Check your 'output' path."
        )

    filename = f"{path.stem}{suffix}" if suffix else f"{path.name}{default_extension}"
    return str(path.with_name(filename))
