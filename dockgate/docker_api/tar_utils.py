"""
TAR Archive utilities for build contexts and container archives
"""

import io
import os
import tarfile
import time

from .exceptions import RequestBuildError


def create_tar_from_directory(dir_path: str) -> bytes:
    """
    Create tar archive of a build context directory

    Entries are stored relative to dir_path, so a Dockerfile at the top of
    the directory lands at the top of the archive.

    Args:
        dir_path: Path to directory to archive

    Returns:
        Tar archive as bytes

    Raises:
        RequestBuildError: If dir_path is not a readable directory
    """
    if not os.path.isdir(dir_path):
        raise RequestBuildError(f"Build context is not a directory: {dir_path}")

    tar_stream = io.BytesIO()

    try:
        with tarfile.open(fileobj=tar_stream, mode='w') as tar:
            for root, dirs, files in os.walk(dir_path):
                dirs.sort()
                for name in sorted(files):
                    file_path = os.path.join(root, name)
                    arcname = os.path.relpath(file_path, dir_path)
                    tar.add(file_path, arcname=arcname, recursive=False)
    except OSError as e:
        raise RequestBuildError(f"Could not archive build context {dir_path}: {e}") from e

    return tar_stream.getvalue()


def create_tar_from_bytes(name: str, data: bytes, mode: int = 0o644) -> bytes:
    """
    Create tar archive holding a single file

    Args:
        name: Name of file in archive
        data: File content
        mode: File permissions

    Returns:
        Tar archive as bytes
    """
    info = tarfile.TarInfo(name=name.lstrip('/'))
    info.size = len(data)
    info.mode = mode
    info.mtime = int(time.time())

    tar_stream = io.BytesIO()
    with tarfile.open(fileobj=tar_stream, mode='w') as tar:
        tar.addfile(info, io.BytesIO(data))

    return tar_stream.getvalue()


def list_tar_contents(tar_data: bytes) -> list:
    """
    List contents of tar archive

    Args:
        tar_data: Tar archive as bytes

    Returns:
        List of filenames in archive
    """
    tar_stream = io.BytesIO(tar_data)

    with tarfile.open(fileobj=tar_stream, mode='r') as tar:
        return tar.getnames()
