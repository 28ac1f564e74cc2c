# exceptions.py

class CloudinaryFsError(Exception):
    """Base class for errors raised inside the adapter."""
    pass

class InvalidMetadataError(CloudinaryFsError):
    """A remote resource could not be normalized (e.g., an unparsable timestamp)."""
    pass

class ConfigurationError(CloudinaryFsError):
    """The adapter could not be built from the given settings."""
    pass
