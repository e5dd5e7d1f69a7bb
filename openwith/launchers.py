"""
Platform-dependent ways to start an external program for a file.

All launchers return as soon as the program was started. They keep no
reference to the started process, so nothing waits for its termination.
"""
import os
import shlex
import shutil
import subprocess
import sys

# openwith package
from . import logger

# Accepted values for the choice of launcher
LAUNCHER_KINDS = ('auto', 'shell', 'native')

class LaunchError(Exception):
    """
    Used to indicate that a program could not be launched for a file.
    """
    pass

def get_platform_starter(platform=None):
    """
    Return the name of the tool used to open a file in the "preferred way"
    on the given `platform` (`sys.platform` if `None`).
    """
    platform = sys.platform if platform is None else platform
    if platform == 'darwin':
        return 'open'
    return 'xdg-open'

class ProcessLauncher(object):
    """
    Interface of the launch primitive used by the dispatcher.
    """
    def launch(self, program, arguments, path):
        """
        Start `program` with the given `arguments` for the file at `path`
        and return immediately.
        """
        raise NotImplementedError

class DetachedShellLauncher(ProcessLauncher):
    """
    Runs the program through a shell under `nohup`, so that it survives the
    termination of the calling process. The program's output is discarded.
    """
    def __init__(self, shell='/bin/sh', null_device=os.devnull):
        self.shell = shell
        self.null_device = null_device

    def get_commandline(self, program, arguments):
        """
        Return the shell command line for running `program` with the given
        `arguments`. Each argument is quoted, while `program` is inserted
        as given, so that it may carry options of its own (e.g. "mplayer -fs").
        """
        quoted = ' '.join(shlex.quote(arg) for arg in arguments)
        return 'exec nohup {0} {1} >{2}'.format(program, quoted,
                                                 self.null_device)

    def launch(self, program, arguments, path=None):
        cmdline = self.get_commandline(program, arguments)
        logger.debug('Running {0!r}'.format(cmdline))
        subprocess.Popen([self.shell, '-c', cmdline],
                         stdin=subprocess.DEVNULL,
                         stdout=subprocess.DEVNULL,
                         stderr=subprocess.DEVNULL,
                         close_fds=True,
                         start_new_session=True)

class NativeOpenLauncher(ProcessLauncher):
    """
    Delegates to the operating system's way of opening a file with its
    preferred application. The association's program and arguments are
    ignored, only the path is passed on.
    """
    def __init__(self, starter=None):
        """
        `starter` is the tool the path is handed to. Without one,
        `os.startfile()` is used where the platform has it, otherwise the
        tool given by `get_platform_starter()`.
        """
        self.starter = starter or None

    def launch(self, program, arguments, path):
        startfile = getattr(os, 'startfile', None)
        if self.starter is None and startfile is not None:
            startfile(path)
            return
        starter = self.starter or get_platform_starter()
        if shutil.which(starter) is None:
            raise LaunchError('Unable to find starter {0!r}'.format(starter))
        subprocess.Popen([starter, path],
                         stdin=subprocess.DEVNULL,
                         stdout=subprocess.DEVNULL,
                         stderr=subprocess.DEVNULL,
                         close_fds=True,
                         start_new_session=True)

def get_default_launcher(platform=None, starter=None, kind='auto'):
    """
    Return the launcher of the given `kind`: "shell" means a
    `DetachedShellLauncher` and "native" a `NativeOpenLauncher` using
    `starter`. With "auto" the choice depends on `platform` (`sys.platform`
    if `None`): native on Windows, the shell on any other platform.
    """
    if kind not in LAUNCHER_KINDS:
        raise ValueError('Unknown launcher: {0!r}'.format(kind))
    if kind == 'auto':
        platform = sys.platform if platform is None else platform
        kind = 'native' if platform.startswith('win') else 'shell'
    if kind == 'native':
        return NativeOpenLauncher(starter)
    return DetachedShellLauncher()
