# tests/utils/__init__.py

from .config import make_args, make_resolved, write_config_file
from .constants import DEFAULT_TEST_LOG_LEVEL, PROJ_ROOT
from .force_mtime_advance import force_mtime_advance
from .patch_everywhere import patch_everywhere
from .project import SAMPLE_PROJECT, make_project, read_bundle


__all__ = [  # noqa: RUF022
    # config
    "make_args",
    "make_resolved",
    "write_config_file",
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    "PROJ_ROOT",
    # force_mtime_advance
    "force_mtime_advance",
    # patch_everywhere
    "patch_everywhere",
    # project
    "SAMPLE_PROJECT",
    "make_project",
    "read_bundle",
]
