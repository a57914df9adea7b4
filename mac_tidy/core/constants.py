"""Path and tool constants for mac-tidy."""

import pathlib

HOME = str(pathlib.Path.home())

TRASH_PATTERNS = [f"{HOME}/.Trash/*"]
VOLUME_TRASH_PATTERNS = ["/Volumes/*/.Trashes/*"]

SYSTEM_LOG_PATTERNS = [
    "/private/var/log/asl/*.asl",
    "/Library/Logs/DiagnosticReports/*",
    "/Library/Logs/Adobe/*",
]
USER_LOG_PATTERNS = [
    f"{HOME}/Library/Containers/com.apple.mail/Data/Library/Logs/Mail/*",
    f"{HOME}/Library/Logs/CoreSimulator/*",
]

ADOBE_CACHE_PATTERNS = [
    f"{HOME}/Library/Application Support/Adobe/Common/Media Cache Files/*",
]

IOS_APP_PATTERNS = [
    f"{HOME}/Music/iTunes/iTunes Media/Mobile Applications/*",
    f"{HOME}/Pictures/iPhoto Library/iPod Photo Cache/*",
]
IOS_BACKUP_PATTERNS = [f"{HOME}/Library/Application Support/MobileSync/Backup/*"]

XCODE_PATTERNS = [
    f"{HOME}/Library/Developer/Xcode/DerivedData/*",
    f"{HOME}/Library/Developer/Xcode/Archives/*",
]

USER_CACHE_PATTERNS = [f"{HOME}/Library/Caches/*"]

PYENV_CACHE_ENV = "PYENV_VIRTUALENV_CACHE_PATH"

# zopfli compresses best but is very slow, so it is only used below this size
ZOPFLI_MAX_BYTES = 52428800

# Filesystem metadata never worth archiving
ARCHIVE_EXCLUDES = [".DS_Store", "._*", ".Spotlight-V100", ".Trashes", ".fseventsd"]

HEARTBEAT_INTERVAL = 60

SPACE_UNITS = ["Bytes", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB", "YiB"]
