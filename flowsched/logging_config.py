"""Flag-gated console logging for the scheduler."""

import os


class LoggingFlags:
    """Which groups of console messages are printed."""

    # Scheduling pipeline
    SCHEDULE_PROGRESS = False
    FLOW_DETAILS = False

    # Conditions that point at an upstream modelling bug
    WARNINGS = True

    # Command-line summaries
    CLI_OUTPUT = True

    @classmethod
    def _flag_names(cls):
        return [attr for attr in dir(cls) if attr.isupper() and not attr.startswith('_')]

    @classmethod
    def enable_all_debug(cls):
        for attr in cls._flag_names():
            setattr(cls, attr, True)

    @classmethod
    def set_quiet_mode(cls):
        """Warnings only."""
        for attr in cls._flag_names():
            setattr(cls, attr, attr == 'WARNINGS')


def log_if(flag: bool, message: str, *args, **kwargs):
    """Print message only if flag is True"""
    if flag:
        print(message, *args, **kwargs)


if os.getenv("FLOWSCHED_DEBUG", "0") == "1":
    LoggingFlags.enable_all_debug()
