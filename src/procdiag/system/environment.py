"""
Static host and interpreter metadata.

The snapshot is collected once when a session is created and echoed
verbatim into every report. Each field is collected independently; a field
that cannot be read degrades to an empty dict and never raises.
"""

import gc
import logging
import os
import platform
import socket
import sys
import tracemalloc
from typing import Any, Callable, Dict, List

import psutil

from ..validation import safe_execute

logger = logging.getLogger(__name__)

# Interpreter settings worth echoing; other variables may hold secrets.
ENV_VARIABLES = (
    "PYTHONPATH",
    "PYTHONOPTIMIZE",
    "PYTHONMALLOC",
    "PYTHONTRACEMALLOC",
    "PYTHONHASHSEED",
)


def _cpu_model() -> str:
    model = platform.processor()
    if model:
        return model
    if sys.platform.startswith("linux"):
        with open("/proc/cpuinfo", "r") as f:
            for line in f:
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
    return platform.machine()


def _collect_cpus() -> List[Dict[str, Any]]:
    """One entry per logical core with its model and current speed in MHz."""
    count = psutil.cpu_count(logical=True) or 0
    model = safe_execute(_cpu_model, "")
    freqs = safe_execute(lambda: psutil.cpu_freq(percpu=True), []) or []
    cpus = []
    for index in range(count):
        speed = freqs[index].current if index < len(freqs) else (freqs[0].current if freqs else 0)
        cpus.append({"model": model, "speed": round(speed)})
    return cpus


def _collect_heap_statistics() -> Dict[str, Any]:
    stats = {
        "gc_counts": list(gc.get_count()),
        "gc_thresholds": list(gc.get_threshold()),
        "gc_generations": gc.get_stats(),
        "allocated_blocks": sys.getallocatedblocks(),
        "tracemalloc_tracing": tracemalloc.is_tracing(),
    }
    if tracemalloc.is_tracing():
        current, peak = tracemalloc.get_traced_memory()
        stats["traced_current"] = current
        stats["traced_peak"] = peak
    return stats


def _collect_resource_limits() -> Dict[str, Any]:
    import resource

    limits = {}
    for label, key in (
        ("address_space", "RLIMIT_AS"),
        ("data", "RLIMIT_DATA"),
        ("resident_set", "RLIMIT_RSS"),
        ("stack", "RLIMIT_STACK"),
    ):
        if hasattr(resource, key):
            soft, hard = resource.getrlimit(getattr(resource, key))
            limits[label] = {"soft": soft, "hard": hard}
    return limits


def collect_environment_info() -> Dict[str, Any]:
    """
    Collect a best-effort snapshot of host, interpreter and process metadata.

    Returns:
        A dictionary of metadata; any field that failed is an empty dict
    """
    collectors: Dict[str, Callable[[], Any]] = {
        # Host
        "platform": lambda: sys.platform,
        "arch": platform.machine,
        "release": platform.release,
        "hostname": socket.gethostname,
        "cpus": _collect_cpus,
        "total_memory": lambda: psutil.virtual_memory().total,
        # Interpreter
        "python_version": platform.python_version,
        "implementation": platform.python_implementation,
        "compiler": platform.python_compiler,
        "psutil_version": lambda: psutil.__version__,
        # Process
        "pid": os.getpid,
        "ppid": os.getppid,
        "executable": lambda: sys.executable,
        "argv": lambda: list(sys.argv),
        "orig_argv": lambda: list(getattr(sys, "orig_argv", [])),
        "env": lambda: {name: os.environ.get(name) for name in ENV_VARIABLES},
        # Memory
        "heap_statistics": _collect_heap_statistics,
        "resource_limits": _collect_resource_limits,
    }

    info: Dict[str, Any] = {}
    for field, collect in collectors.items():
        info[field] = safe_execute(collect, {}, context=f"environment field '{field}'")
    logger.debug(f"Collected environment snapshot with {len(info)} fields")
    return info
