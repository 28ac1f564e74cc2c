# client.py
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Union

import cloudinary.api
import cloudinary.uploader
import cloudinary.utils


class CloudinaryClient:
    """
    Client for interacting with the Cloudinary API.
    Credentials are owned by the instance and sent with every call, so several
    clients with different accounts can coexist in one process without touching
    the global `cloudinary.config()`.
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
    ):
        self.credentials = {"cloud_name": cloud_name}
        if api_key:
            self.credentials["api_key"] = api_key
            self.credentials["api_secret"] = api_secret
        logging.info(f"Cloudinary client initialized for cloud '{cloud_name}'.")

    def _with_credentials(self, options: Dict[str, Any]) -> Dict[str, Any]:
        return {**options, **self.credentials}

    def ping(self) -> Dict[str, Any]:
        """Verifies the credentials by calling the Admin API ping endpoint."""
        return cloudinary.api.ping(**self.credentials)

    def upload(
        self,
        file: Union[str, BinaryIO],
        public_id: str,
        tags: Optional[List[str]] = None,
        **options,
    ) -> Dict[str, Any]:
        """Uploads a file object, local path or remote URL under `public_id`."""
        params = dict(options, public_id=public_id)
        if tags:
            params["tags"] = tags
        logging.info(f"Uploading to Cloudinary public id '{public_id}'...")
        return cloudinary.uploader.upload(file, **self._with_credentials(params))

    def rename(self, from_public_id: str, to_public_id: str, **options) -> Dict[str, Any]:
        logging.info(f"Renaming '{from_public_id}' to '{to_public_id}'...")
        return cloudinary.uploader.rename(
            from_public_id, to_public_id, **self._with_credentials(options)
        )

    def destroy(self, public_id: str, **options) -> Dict[str, Any]:
        logging.info(f"Destroying '{public_id}'...")
        return cloudinary.uploader.destroy(public_id, **self._with_credentials(options))

    def resource(self, public_id: str, **options) -> Dict[str, Any]:
        logging.info(f"Fetching resource details for '{public_id}'...")
        return cloudinary.api.resource(public_id, **self._with_credentials(options))

    def list_resources(self, prefix: str = "", **options) -> List[Dict[str, Any]]:
        """
        Returns all resources whose public id starts with `prefix`,
        handling pagination automatically.
        """
        params = dict(options)
        if prefix:
            params["prefix"] = prefix
        logging.info(f"Listing Cloudinary resources with prefix '{prefix}'")
        result = cloudinary.api.resources(**self._with_credentials(params))
        all_resources = list(result.get("resources", []))
        while result.get("next_cursor"):
            logging.info("Found more resources, continuing listing...")
            params["next_cursor"] = result["next_cursor"]
            result = cloudinary.api.resources(**self._with_credentials(params))
            all_resources.extend(result.get("resources", []))
        return all_resources

    def delete_resources_by_prefix(self, prefix: str, **options) -> Dict[str, Any]:
        """
        Deletes all resources whose public id starts with `prefix`.
        Cloudinary deletes one batch per call, so batches are requested until
        the response is no longer partial. The `deleted` maps of all batches
        are merged; `partial` stays set only if the remote stopped without a cursor.
        """
        params = dict(options)
        logging.info(f"Deleting all resources with prefix '{prefix}'...")
        result = cloudinary.api.delete_resources_by_prefix(
            prefix, **self._with_credentials(params)
        )
        deleted = dict(result.get("deleted") or {})
        while result.get("partial") and result.get("next_cursor"):
            logging.info("Deletion was partial, continuing with the next batch...")
            params["next_cursor"] = result["next_cursor"]
            result = cloudinary.api.delete_resources_by_prefix(
                prefix, **self._with_credentials(params)
            )
            deleted.update(result.get("deleted") or {})
        return {"deleted": deleted, "partial": bool(result.get("partial"))}

    def url(self, public_id: str, secure: bool = True, **options) -> str:
        """Builds the delivery URL of a resource."""
        url, _ = cloudinary.utils.cloudinary_url(
            public_id, secure=secure, **self._with_credentials(options)
        )
        return url
