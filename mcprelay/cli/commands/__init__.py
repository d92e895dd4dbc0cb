from . import info_command, run_command  # noqa: F401
