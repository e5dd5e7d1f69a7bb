"""
Open files in external programs based on their names.

Some features:

- Map file name patterns to programs and their arguments
- Hook into a host's file opening, handing matching files to the programs
- Launch the programs detached from the host process
- Ask before launching and ignore repeated triggers of one open
- Read associations from an XDG config file

The Qt front ends live in `openwith.gui` and are not imported here.
"""
__author__ = 'Sebastian Linke'
__license__ = 'MIT'
__version__ = '0.1-dev'

from . import core, hooks, launchers, logger, settings
from .core import (Association, Dispatcher, FILE, FileOpenEvent, HANDLED,
                   NOT_HANDLED, NO_MATCH, resolve)
from .launchers import LaunchError
