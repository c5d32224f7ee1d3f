"""E-book binaries living in a temporary location until committed."""

import asyncio
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import logfire

from content_to_reader.errors import CommitError, LifecycleError


@dataclass(frozen=True)
class _Live:
    path: Path


@dataclass(frozen=True)
class _Disposed:
    path: Path


def _copy_exclusive(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination``, failing if the destination exists."""
    with open(source, "rb") as src, open(destination, "xb") as dst:
        try:
            shutil.copyfileobj(src, dst)
        except BaseException:
            dst.close()
            destination.unlink(missing_ok=True)
            raise


class ReaderFile:
    """An e-book saved in a temporary location.

    The binary can be committed (copied somewhere safe) any number of times.
    Call ``cleanup()`` once done with the file so it isn't left behind in the
    temporary directory; after that every other operation raises
    ``LifecycleError``. ``ReaderFile`` is also an async context manager that
    cleans up on exit.
    """

    def __init__(
        self,
        temporary_path: str | Path,
        format: str = "epub",
        temporary_dir: str | Path | None = None,
    ):
        """Wrap an existing temporary file.

        Args:
            temporary_path: Where the binary lives
            format: Binary format
            temporary_dir: Directory created for the binary, removed on cleanup

        Raises:
            LifecycleError: If the file can't be read
        """
        path = Path(temporary_path)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise LifecycleError(
                f"Fatal error. Can't access file at {path}. Check the temporary directory permissions."
            )
        self._state: Union[_Live, _Disposed] = _Live(path)
        self._format = format
        self._temporary_dir = Path(temporary_dir) if temporary_dir is not None else None

    async def __aenter__(self) -> "ReaderFile":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()

    @property
    def format(self) -> str:
        return self._format

    @property
    def disposed(self) -> bool:
        return isinstance(self._state, _Disposed)

    @property
    def temporary_path(self) -> Path:
        """Path of the temporary binary.

        Raises:
            LifecycleError: If ``cleanup()`` was called
        """
        return self._live().path

    async def save(self, destination: str | Path) -> bytes:
        """Commit the temporary file: copy it to ``destination``.

        Args:
            destination: Target path; must not exist yet

        Returns:
            Contents of the saved file

        Raises:
            LifecycleError: If ``cleanup()`` was called
            CommitError: If the destination exists or can't be written
        """
        source = self._live().path
        target = Path(destination)
        try:
            await asyncio.to_thread(_copy_exclusive, source, target)
        except FileExistsError as e:
            raise CommitError(f"Can't save e-book to {target}: file already exists.") from e
        except OSError as e:
            raise CommitError(f"Can't save e-book to {target}: {e.strerror or e}") from e

        logfire.info("E-book saved", destination=str(target))
        return await asyncio.to_thread(target.read_bytes)

    async def get_bytes(self) -> bytes:
        """Read the temporary binary."""
        return await asyncio.to_thread(self._live().path.read_bytes)

    async def cleanup(self) -> None:
        """Remove the temporary binary and its directory.

        Idempotent. Removal errors are logged, never raised, so cleanup can't
        mask the error that led to it.
        """
        state = self._state
        if isinstance(state, _Disposed):
            return
        # Flip state before suspending so concurrent callers see it disposed
        self._state = _Disposed(state.path)
        try:
            await asyncio.to_thread(self._remove, state.path, self._temporary_dir)
        except OSError as e:
            logfire.warning("Temporary e-book cleanup failed", path=str(state.path), error=str(e))
            return
        logfire.debug("Temporary e-book removed", path=str(state.path))

    def _live(self) -> _Live:
        state = self._state
        if isinstance(state, _Live):
            return state
        raise LifecycleError(
            f"Fatal error. File at {state.path} doesn't exist anymore. "
            "`cleanup()` was called on this instance."
        )

    @staticmethod
    def _remove(path: Path, directory: Path | None) -> None:
        path.unlink(missing_ok=True)
        if directory is not None and directory.exists():
            shutil.rmtree(directory)
