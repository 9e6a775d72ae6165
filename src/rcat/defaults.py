"""
Default values shared by the CLI and the core. Exclusions are matched per path component, see `filters.is_excluded`.
"""

# region ---[ Default Paths and Exclusions ]---

from rcat.types import TExclusion

DEFAULT_EXCLUSIONS: tuple[TExclusion, ...] = (
    # Build artifacts
    "target",
    # IDE and editor files
    ".idea",
    ".vscode",
    # VCS
    ".git",
    ".gitignore",
    # Lock files
    "Cargo.lock",
)

# endregion ---[ Default Paths and Exclusions ]---
# region ---[ Rendering ]---

# Only this many leading bytes are inspected when deciding whether a file is binary.
BINARY_PROBE_BYTES = 8 * 1024
DEFAULT_THEME = "monokai"

# endregion ---[ Rendering ]---
# region ---[ Default CLI Options ]---

DEFAULT_RUN_PATH = "."
DEFAULT_RUN_PATH_ENV = "DNAME"
DEFAULT_DEPTH = None
DEFAULT_EXTENSIONS_FILTER = []
DEFAULT_EXCLUDE_FILTER = []
DEFAULT_EXCLUDE_FROM = []
DEFAULT_NO_EXCLUDE = False
DEFAULT_NO_COLOR = False
DEFAULT_LIST = False
DEFAULT_JSON = False
DEFAULT_INCLUDE_DIRECTORIES = False
DEFAULT_NO_FOLLOW = False
DEFAULT_VERBOSITY = 0

# endregion ---[ Default CLI Options ]---
