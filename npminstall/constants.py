from enum import Enum

NODE_MODULES = "node_modules"
PACKAGE_JSON = "package.json"
PACKAGE_LOCK = "package-lock.json"
NPM_CACHE = "npm-cache"

# Cache metadata keys
CACHE_SHA_KEY = "cache_sha"
BUILT_AT_KEY = "built_at"


class ProcessKind(str, Enum):
    """The fixed set of installation processes."""

    CI = "ci"
    INSTALL = "install"
    REUSE = "reuse"

    @property
    def label(self) -> str:
        if self is ProcessKind.REUSE:
            return "reuse vendored node_modules"
        return f"npm {self.value}"
