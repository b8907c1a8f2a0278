"""Core constants used across update repository modules.

This module centralizes fixed paths, names, and tool defaults.
Keeping values here avoids magic literals in pipeline logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DOWNLOAD_DIR = Path("/download")
DEFAULT_UPDATES_DIR = Path("/mounts")
DEFAULT_INSTSYS_PARTS_PATH = Path("/etc/instsys.parts")
DEFAULT_COMMAND_TIMEOUT_SECONDS = 600.0
ROOT_DIR = Path("/")
REPOSITORY_PRODUCT_DIR = "/"
REPOSITORY_NAME = "Installer updates"
REPOSITORY_ALIAS = "instsys-updates"
REPOSITORY_TYPE_NONE = "NONE"
RESOLVABLE_KIND_PACKAGE = "package"
IMAGE_NAME_PREFIX = "update_"
IMAGE_INDEX_WIDTH = 3
MOUNT_POINT_NAME_PREFIX = "update_"
MOUNT_POINT_INDEX_WIDTH = 4
TEMP_FILE_PREFIX = "instsys-update-"
TEMP_DIR_PREFIX = "instsys-update-extract-"
MKSQUASHFS_BINARY = "mksquashfs"
MOUNT_BINARY = "mount"
ADDDIR_BINARY = "adddir"
EXTRACT_BINARY = "bsdtar"
MISSING_BINARY_EXIT_CODE = 127
TIMEOUT_EXIT_CODE = 124
REDACTED_USERINFO = "***"
