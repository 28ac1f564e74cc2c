# storage/base.py
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Optional, Union

from .dto import Result


class FilesystemAdapter(ABC):
    """
    Abstract base class for a filesystem-style adapter.
    Defines the common interface that a remote store must implement so callers
    can treat it as a mounted filesystem. Every method returns a Result.
    """

    @abstractmethod
    def write(
        self, path: str, contents: Union[bytes, str], options: Optional[Dict[str, Any]] = None
    ) -> Result:
        """
        Writes a new file.

        :param path: The path of the file, relative to the adapter root.
        :param contents: The raw file contents.
        :param options: Per-call options.
        :return: A Result holding the file metadata.
        """
        pass

    @abstractmethod
    def write_stream(
        self, path: str, stream: BinaryIO, options: Optional[Dict[str, Any]] = None
    ) -> Result:
        """
        Writes a new file from a readable binary stream.

        :param path: The path of the file, relative to the adapter root.
        :param stream: An open binary stream.
        :param options: Per-call options.
        """
        pass

    @abstractmethod
    def update(
        self, path: str, contents: Union[bytes, str], options: Optional[Dict[str, Any]] = None
    ) -> Result:
        """Updates an existing file."""
        pass

    @abstractmethod
    def update_stream(
        self, path: str, stream: BinaryIO, options: Optional[Dict[str, Any]] = None
    ) -> Result:
        """Updates an existing file from a readable binary stream."""
        pass

    @abstractmethod
    def rename(self, path: str, newpath: str) -> Result:
        """
        Renames a file.

        :param path: The current path of the file.
        :param newpath: The new path of the file.
        """
        pass

    @abstractmethod
    def copy(self, path: str, newpath: str) -> Result:
        """
        Copies a file.

        :param path: The path of the source file.
        :param newpath: The path of the copy.
        """
        pass

    @abstractmethod
    def delete(self, path: str) -> Result:
        """
        Deletes a file.

        :param path: The path of the file to delete.
        """
        pass

    @abstractmethod
    def delete_dir(self, dirname: str) -> Result:
        """
        Deletes a directory and everything below it.

        :param dirname: The path of the directory.
        """
        pass

    @abstractmethod
    def create_dir(self, dirname: str, options: Optional[Dict[str, Any]] = None) -> Result:
        """
        Creates a directory.

        :param dirname: The path of the directory.
        """
        pass

    @abstractmethod
    def has(self, path: str) -> Result:
        """Checks whether a file exists."""
        pass

    @abstractmethod
    def read(self, path: str) -> Result:
        """Reads a file."""
        pass

    @abstractmethod
    def read_stream(self, path: str) -> Result:
        """Reads a file as a stream."""
        pass

    @abstractmethod
    def list_contents(self, directory: str = "", recursive: bool = False) -> Result:
        """
        Lists the contents of a directory.

        :param directory: The path of the directory to list.
        :param recursive: Whether to descend into subdirectories.
        """
        pass

    @abstractmethod
    def get_metadata(self, path: str) -> Result:
        """Gets all the metadata of a file."""
        pass

    @abstractmethod
    def get_size(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_mimetype(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_timestamp(self, path: str) -> Result:
        pass

    @abstractmethod
    def get_visibility(self, path: str) -> Result:
        pass

    @abstractmethod
    def set_visibility(self, path: str, visibility: str) -> Result:
        pass
