"""Point-in-time listing of open TCP/UDP ports and the processes that own them."""

__version__ = "0.1.0"
