"""Global configuration: names, constants, environment settings."""

# Control directory created by ``init`` inside the working tree
CONTROL_DIR = ".gitlite"

DEFAULT_BRANCH = "master"

INITIAL_MESSAGE = "initial commit"

# Key layout inside the control directory
OBJECTS_PREFIX = "objects/"
HEADS_PREFIX = "refs/heads/"
HEAD_KEY = "HEAD"
INDEX_KEY = "index"
SYMREF_PREFIX = "ref: "

# SHA-1 hex digest length; shorter commit ids are treated as prefixes
HASH_LENGTH = 40

# Abbreviated parent ids on ``Merge:`` log lines
SHORT_HASH_LENGTH = 7

# Log date layout, e.g. "Thu Jan 1 00:00:00 1970 +0000"
DATE_FORMAT = "%a %b {day} %H:%M:%S %Y %z"

CONFLICT_START = "<<<<<<< HEAD\n"
CONFLICT_SEP = "=======\n"
CONFLICT_END = ">>>>>>>\n"

# Environment variables read by the command line front end
LOG_LEVEL_ENV = "GITLITE_LOG_LEVEL"
STORAGE_ENV = "GITLITE_STORAGE"
DEFAULT_STORAGE = "files"
