"""
Main entry point for running lwm as a module.

Usage:
    python -m lwm

Environment:
    DISPLAY    X display to manage
    LWM_LOG    Log file (default ~/lwm.log)
    LWM_DEBUG  Log at DEBUG level and trace every published topic
"""

from .xwm import main

if __name__ == "__main__":
    import sys

    sys.exit(main())
