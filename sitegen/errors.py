class CompilationError(Exception):
    """Raised when a domain cannot be compiled at all.

    A compilation either yields the complete file set or fails with one of
    these; partial sites are never returned.
    """


class DomainNotFoundError(CompilationError):
    """The bundle handed to the compiler carries no domain record."""


class PageShellMissingError(CompilationError):
    """A page body was wrapped without the shared header/footer shell."""
