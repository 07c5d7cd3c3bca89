"""Runnable operating-systems teaching programs: processes, scheduling, threads, synchronisation, persistence and UDP."""

__version__ = "1.0.0"

__all__ = [
    "bugs",
    "cas",
    "cv",
    "intro",
    "lottery",
    "procs",
    "pstack",
    "sema",
    "sync",
    "threads_demo",
    "timing",
    "udp",
    "udp_client",
    "udp_server",
]