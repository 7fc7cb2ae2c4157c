"""Configure and query serial lines through POSIX termios.

``ttyline.types`` holds the enumerations and exceptions; ``ttyline.lineconf``
holds the functions that read and change line settings.
"""

__version__ = "0.1.0"
__all__ = ["lineconf", "types"]