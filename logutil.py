import os
import threading
import multiprocessing
import config

_SCOPE_SWITCHES = {
    "MAPGEN": "LOG_MAPGEN",
    "ATLAS": "LOG_ATLAS",
    "RENDER": "LOG_RENDER",
}


def enabled(scope, level="INFO"):
    if level in ("WARN", "ERROR"):
        return True
    if level == "DEBUG" and not getattr(config, "LOG_DEBUG", False):
        return False
    switch = _SCOPE_SWITCHES.get(scope)
    if switch is not None and not getattr(config, switch, True):
        return False
    return True


def log(scope, msg, level="INFO"):
    if not enabled(scope, level):
        return
    pid = os.getpid()
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    text = f"[{level} pid{pid} proc{proc} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level == "ERROR":
            text = f"\x1b[31m{text}\x1b[0m"
        elif level == "WARN":
            text = f"\x1b[33m{text}\x1b[0m"
        elif proc == "MainProcess" and thread != "MainThread":
            # Worker thread in the main process.
            text = f"\x1b[32m{text}\x1b[0m"
    print(text)
