import posixpath
from typing import Tuple


def prefix_path(path_prefix: str, path: str) -> str:
    """
    Maps a caller path to a Cloudinary public id under the configured prefix.
    A path already under the prefix is returned as is, so applying this twice
    gives the same id.
    """
    prefix = path_prefix.strip("/")
    path = path.lstrip("/")
    if not prefix:
        return path
    if path == prefix or path.startswith(prefix + "/"):
        return path
    return f"{prefix}/{path}".lstrip("/")


def strip_extension(public_id: str) -> Tuple[str, str]:
    """
    Drops the file extension from a public id.
    Returns (remote id without extension, bare filename).
    """
    dirname, basename = posixpath.split(public_id)
    filename = posixpath.splitext(basename)[0]
    if dirname:
        return f"{dirname}/{filename}", filename
    return filename, filename


def child_directory(prefix: str, public_id: str):
    """
    Returns the immediate subdirectory of `prefix` that contains `public_id`,
    or None when the id sits directly in `prefix` or outside it.
    """
    base = prefix.strip("/")
    if base:
        if not public_id.startswith(base + "/"):
            return None
        remainder = public_id[len(base) + 1:]
    else:
        remainder = public_id
    if "/" not in remainder:
        return None
    head = remainder.split("/", 1)[0]
    return f"{base}/{head}" if base else head
