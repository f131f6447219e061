class NotFoundError(RuntimeError):
    """Raised when an input file cannot be read or an output directory is missing."""
