# adapter.py
import logging
import tempfile
from typing import Any, BinaryIO, Dict, Optional, Union

import requests
from cloudinary.exceptions import Error as CloudinaryError
from cloudinary.exceptions import NotFound

from .client import CloudinaryClient
from .config import UPLOAD_OPTION_KEYS, Settings
from .exceptions import InvalidMetadataError
from .metadata import (
    prepare_mimetype,
    prepare_resource_metadata,
    prepare_size,
    prepare_timestamp,
)
from .paths import child_directory, prefix_path, strip_extension
from .storage.base import FilesystemAdapter
from .storage.dto import DirectoryEntry, ErrorKind, FileContents, FileStream, Result


class CloudinaryAdapter(FilesystemAdapter):
    """
    Filesystem adapter over a Cloudinary media library, implementing the
    FilesystemAdapter interface. Paths map to public ids; directories exist
    only as id prefixes; every resource is public.
    """

    def __init__(self, settings: Settings, client: Optional[CloudinaryClient] = None):
        self.settings = settings
        self.client = client or CloudinaryClient(**settings.credentials())

    def prefix_path(self, path: str) -> str:
        return prefix_path(self.settings.path_prefix, path)

    def merge_options(self, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Merges per-call options over the disk defaults.
        Top-level allow-listed keys override the disk values and the nested
        "cloudinary" block overrides both.
        """
        options = options or {}
        merged = self.settings.disk_options()
        merged.update({k: options[k] for k in UPLOAD_OPTION_KEYS if k in options})
        merged.update(options.get("cloudinary") or {})
        return merged

    def _remote_failure(self, kind: ErrorKind, path: str, error: Exception) -> Result:
        if isinstance(error, NotFound):
            logging.warning(f"Cloudinary resource '{path}' not found.")
            return Result.failure(ErrorKind.NOT_FOUND, str(error))
        logging.error(f"Cloudinary call for '{path}' failed: {error}")
        return Result.failure(kind, str(error))

    def write(
        self, path: str, contents: Union[bytes, str], options: Optional[Dict[str, Any]] = None
    ) -> Result:
        """
        Buffers the contents in a temporary file and uploads it.
        The temporary file is removed when the call returns.
        """
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        with tempfile.TemporaryFile() as buffer:
            buffer.write(contents)
            buffer.seek(0)
            uploaded = self.write_stream(path, buffer, options)
        if not uploaded:
            return uploaded
        try:
            return Result.success(prepare_resource_metadata(uploaded.value))
        except InvalidMetadataError as e:
            logging.error(f"Upload of '{path}' returned unusable metadata: {e}")
            return Result.failure(ErrorKind.INVALID_METADATA, str(e))

    def write_stream(
        self, path: str, stream: BinaryIO, options: Optional[Dict[str, Any]] = None
    ) -> Result:
        """Uploads a stream and returns the raw Cloudinary upload response."""
        public_id = self.prefix_path(path)
        merged = self.merge_options(options)
        tags = merged.pop("tags", [])
        # The public id always comes from the path.
        merged.pop("public_id", None)
        try:
            response = self.client.upload(stream, public_id, tags=tags, **merged)
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.UPLOAD_FAILED, public_id, e)
        return Result.success(dict(response))

    def update(
        self, path: str, contents: Union[bytes, str], options: Optional[Dict[str, Any]] = None
    ) -> Result:
        # Cloudinary has no update primitive; overwrite instead.
        return self.write(path, contents, options)

    def update_stream(
        self, path: str, stream: BinaryIO, options: Optional[Dict[str, Any]] = None
    ) -> Result:
        return self.write_stream(path, stream, options)

    def rename(self, path: str, newpath: str) -> Result:
        """Renames a resource. Extensions are dropped since public ids carry none."""
        from_id, _ = strip_extension(self.prefix_path(path))
        to_id, to_filename = strip_extension(self.prefix_path(newpath))
        try:
            response = self.client.rename(from_id, to_id)
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.RENAME_FAILED, from_id, e)

        renamed_id = response.get("public_id", "")
        if renamed_id.rsplit("/", 1)[-1] != to_filename:
            logging.warning(
                f"Rename of '{from_id}' returned '{renamed_id}', expected '{to_id}'."
            )
            return Result.failure(
                ErrorKind.RENAME_FAILED, f"Remote reported public id '{renamed_id}'"
            )
        return Result.success(True)

    def copy(self, path: str, newpath: str) -> Result:
        """Copies a resource by uploading its delivery URL under the new id."""
        source_url = self.client.url(self.prefix_path(path))
        to_id = self.prefix_path(newpath)
        try:
            response = self.client.upload(source_url, to_id)
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.COPY_FAILED, to_id, e)

        if response.get("public_id") != to_id:
            logging.warning(f"Copy to '{to_id}' returned '{response.get('public_id')}'.")
            return Result.failure(
                ErrorKind.COPY_FAILED,
                f"Remote reported public id '{response.get('public_id')}'",
            )
        return Result.success(True)

    def delete(self, path: str) -> Result:
        public_id = self.prefix_path(path)
        try:
            response = self.client.destroy(public_id, invalidate=True)
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.DELETE_FAILED, public_id, e)

        outcome = response.get("result")
        if outcome != "ok":
            logging.warning(f"Deleting '{public_id}' returned '{outcome}'.")
            return Result.failure(ErrorKind.DELETE_FAILED, f"Remote reported '{outcome}'")
        return Result.success(True)

    def delete_dir(self, dirname: str) -> Result:
        """
        Deletes every resource whose public id starts with the directory prefix.
        Returns the list of deleted ids; an empty list still counts as success,
        a deletion the remote left unfinished does not.
        """
        prefix = self.prefix_path(dirname)
        try:
            response = self.client.delete_resources_by_prefix(
                prefix, type="upload", resource_type=self.settings.resource_type
            )
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.DELETE_FAILED, prefix, e)

        deleted = list((response.get("deleted") or {}).keys())
        if response.get("partial"):
            logging.warning(
                f"Deleting prefix '{prefix}' stopped early; {len(deleted)} resources removed."
            )
            return Result.failure(
                ErrorKind.DELETE_FAILED,
                f"Only {len(deleted)} resources under '{prefix}' were deleted",
            )
        logging.info(f"Deleted {len(deleted)} resources under '{prefix}'.")
        return Result.success(deleted)

    def create_dir(self, dirname: str, options: Optional[Dict[str, Any]] = None) -> Result:
        # Directories are only part of a public id; there is nothing to create.
        return Result.success(DirectoryEntry(path=dirname))

    def has(self, path: str) -> Result:
        public_id = self.prefix_path(path)
        try:
            self.client.resource(public_id)
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.REMOTE_ERROR, public_id, e)
        return Result.success(True)

    def _download_failure(self, path: str, error: requests.RequestException) -> Result:
        response = getattr(error, "response", None)
        if response is not None and response.status_code == 404:
            logging.warning(f"File '{path}' not found at its delivery URL.")
            return Result.failure(ErrorKind.NOT_FOUND, str(error))
        logging.error(f"Failed to download '{path}': {error}")
        return Result.failure(ErrorKind.READ_FAILED, str(error))

    def read(self, path: str) -> Result:
        url = self.client.url(self.prefix_path(path), secure=self.settings.secure)
        try:
            logging.info(f"Downloading {url}...")
            response = requests.get(url)
            response.raise_for_status()
        except requests.RequestException as e:
            return self._download_failure(path, e)
        return Result.success(FileContents(contents=response.content, path=path))

    def read_stream(self, path: str) -> Result:
        url = self.client.url(self.prefix_path(path), secure=self.settings.secure)
        try:
            logging.info(f"Opening stream for {url}...")
            response = requests.get(url, stream=True)
        except requests.RequestException as e:
            return self._download_failure(path, e)
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            response.close()
            return self._download_failure(path, e)
        return Result.success(FileStream(stream=response.raw, path=path))

    def _list_resources(self, directory: str):
        return self.client.list_resources(
            prefix=self.prefix_path(directory),
            type="upload",
            resource_type=self.settings.resource_type,
        )

    def list_contents(self, directory: str = "", recursive: bool = False) -> Result:
        """
        Lists every resource under the directory prefix.
        Public ids are flat, so the listing is always recursive.
        """
        try:
            resources = self._list_resources(directory)
            return Result.success([prepare_resource_metadata(r) for r in resources])
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.REMOTE_ERROR, directory, e)
        except InvalidMetadataError as e:
            logging.error(f"Listing '{directory}' returned unusable metadata: {e}")
            return Result.failure(ErrorKind.INVALID_METADATA, str(e))

    def list_directories(self, directory: str = "") -> Result:
        """Derives the immediate subdirectories of a directory from the ids below it."""
        prefix = self.prefix_path(directory)
        try:
            resources = self._list_resources(directory)
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.REMOTE_ERROR, directory, e)

        found = set()
        for resource in resources:
            child = child_directory(prefix, resource.get("public_id", ""))
            if child:
                found.add(child)
        return Result.success([DirectoryEntry(path=p) for p in sorted(found)])

    def _normalized(self, path: str, prepare) -> Result:
        public_id = self.prefix_path(path)
        try:
            resource = self.client.resource(public_id)
            return Result.success(prepare(resource))
        except CloudinaryError as e:
            return self._remote_failure(ErrorKind.REMOTE_ERROR, public_id, e)
        except InvalidMetadataError as e:
            logging.error(f"Resource '{public_id}' has unusable metadata: {e}")
            return Result.failure(ErrorKind.INVALID_METADATA, str(e))

    def get_metadata(self, path: str) -> Result:
        return self._normalized(path, prepare_resource_metadata)

    def get_size(self, path: str) -> Result:
        return self._normalized(path, prepare_size)

    def get_mimetype(self, path: str) -> Result:
        # Cloudinary has no real mimetypes; see prepare_mimetype.
        return self._normalized(path, prepare_mimetype)

    def get_timestamp(self, path: str) -> Result:
        return self._normalized(path, prepare_timestamp)

    def get_url(self, path: str, options: Optional[Dict[str, Any]] = None) -> str:
        """Builds the delivery URL of a file, https unless `secure` is False."""
        merged = self.merge_options(options)
        secure = merged.pop("secure", True)
        merged.pop("tags", None)
        merged.pop("upload_preset", None)
        return self.client.url(self.prefix_path(path), secure=secure, **merged)

    def get_visibility(self, path: str) -> Result:
        return Result.failure(
            ErrorKind.UNSUPPORTED, "Cloudinary does not support visibility; all is public."
        )

    def set_visibility(self, path: str, visibility: str) -> Result:
        return Result.failure(
            ErrorKind.UNSUPPORTED, "Cloudinary does not support visibility; all is public."
        )
