"""Error taxonomy for conversion, templates, and blog synchronization"""

from pathlib import Path


class WellingtonError(Exception):
    """Base class for every error reported to the user."""


# --- sidenotes ---

class SidenoteError(WellingtonError):
    """Malformed sidenote delimiters in a document."""


class SidenoteNotMatched(SidenoteError):
    def __init__(self, context: str):
        self.context = context
        super().__init__(f"a sidenote delimiter was not matched near '{context}'")


class SidenoteNested(SidenoteError):
    def __init__(self, outer: str, inner: str):
        self.outer = outer
        self.inner = inner
        super().__init__(
            f"encountered a nested sidenote: '{inner}' opens inside the sidenote opened at '{outer}'"
        )


# --- templates ---

class TemplateError(WellingtonError):
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Bad template: {message}")


class TemplateReadError(TemplateError):
    def __init__(self, path: str):
        super().__init__(path, f"couldn't read file {path}")


class TemplateInvalidSyntax(TemplateError):
    def __init__(self, path: str, detail: str = ""):
        msg = f"template at {path} has bad syntax"
        super().__init__(path, f"{msg}: {detail}" if detail else msg)


class TemplateValidationFailed(TemplateError):
    def __init__(self, path: str, detail: str = ""):
        msg = f"template at {path} didn't pass validation. Are all of the fields correct?"
        super().__init__(path, f"{msg} ({detail})" if detail else msg)


# --- blog / filesystem ---

class BlogError(WellingtonError):
    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        super().__init__(message)


class DirectoryReadError(BlogError):
    def __init__(self, path: Path | str):
        super().__init__(path, f"couldn't read directory {path}")


class FileReadError(BlogError):
    def __init__(self, path: Path | str):
        super().__init__(path, f"couldn't read file {path}")


class FileWriteError(BlogError):
    def __init__(self, path: Path | str):
        super().__init__(path, f"couldn't write file {path}")


class IndexParseError(BlogError):
    def __init__(self, path: Path | str, line: int, detail: str = ""):
        self.line = line
        msg = f"corrupt index {path} at line {line}"
        super().__init__(path, f"{msg}: {detail}" if detail else msg)


class IndexWriteError(BlogError):
    def __init__(self, path: Path | str):
        super().__init__(path, f"couldn't write index {path}")


class NotInitialized(BlogError):
    def __init__(self, path: Path | str):
        super().__init__(
            path, f"no blog index at {path}. Run `wellington init` in the blog directory first."
        )


# --- site metadata ---

class MetaError(WellingtonError):
    """Site metadata is missing, unreadable, or invalid."""
