import platform

from surrealvm.errors import PreconditionError

# platform.system() -> download host name
_OS_NAMES = {
    "Linux": "linux",
    "Darwin": "darwin",
}

# platform.machine() -> download host name
_CPU_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x86": "amd64",
    "i386": "amd64",
    "i686": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm64",
    "armv8l": "arm64",
    "arm": "arm64",
}


def os_name() -> str:
    """Name of the current operating system as used in release archive names."""
    system = platform.system()
    if system not in _OS_NAMES:
        raise PreconditionError(f"Unsupported operating system: '{system}'.")
    return _OS_NAMES[system]


def cpu_name() -> str:
    """Name of the current CPU architecture as used in release archive names."""
    machine = platform.machine()
    if machine.lower() not in _CPU_NAMES:
        raise PreconditionError(f"Unsupported CPU architecture: '{machine}'.")
    return _CPU_NAMES[machine.lower()]
