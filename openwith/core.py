"""
Basic functionality to dispatch opened files to external programs.
"""
from collections import namedtuple
import re
import sys
import time

# openwith package
from . import logger
from .launchers import get_default_launcher

### Data types

class _FilePlaceholder(object):
    """
    Marks the template slot, which is replaced with the path of the file
    being opened. Use the module-level `FILE` instead of instantiating it.
    """
    __slots__ = ()

    def __repr__(self):
        return 'FILE'

FILE = _FilePlaceholder()

class _NoMatch(object):
    """
    Returned by `resolve()` when no association applies to a path.
    """
    __slots__ = ()

    def __repr__(self):
        return 'NO_MATCH'

    def __bool__(self):
        return False

NO_MATCH = _NoMatch()

# Results of `Dispatcher.handle()`
HANDLED = 'handled'
NOT_HANDLED = 'not-handled'

Association = namedtuple('Association', 'pattern program template')
Association.__doc__ = """
Rule mapping a file name pattern to a program. `template` is a sequence of
literal strings and `FILE` placeholders, given to `program` in that order.
"""

ResolvedInvocation = namedtuple('ResolvedInvocation', 'program arguments')

FileOpenEvent = namedtuple('FileOpenEvent', 'path trigger_id target')
FileOpenEvent.__new__.__defaults__ = ('', None)

DEFAULT_ASSOCIATIONS = (
    Association(r'\.mp3$', 'xmms', (FILE,)),
    Association(r'\.(?:mpe?g|avi|wmv)$', 'mplayer', ('-idx', FILE)),
    Association(r'\.(?:jp?g|png)$', 'display', (FILE,)),
)

# Minimal time between two activations (in seconds)
DEBOUNCE_INTERVAL = 2.0

### Resolution

def resolve(path, table):
    """
    Return the first association inside `table` whose pattern matches at
    any position of `path`. Patterns are tried in table order, so a more
    specific pattern must be placed before a more general one. Return
    `NO_MATCH` if none of them matches.

    A pattern may be a string or a compiled regular expression. It is not
    anchored unless it anchors itself (e.g. by ending with `$`).
    """
    for association in table:
        if re.search(association.pattern, path):
            return association
    return NO_MATCH

def substitute_arguments(template, path):
    """
    Return a list of arguments, where each `FILE` placeholder inside the
    given `template` is replaced with `path`. Literal entries are taken
    unchanged and the order of the template is kept.
    """
    return [path if item is FILE else item for item in template]

def get_invocation(association, path):
    """
    Build the `ResolvedInvocation` for running `association` on `path`.
    """
    arguments = substitute_arguments(association.template, path)
    return ResolvedInvocation(association.program, arguments)

def is_excluded(trigger_id, exclusions):
    """
    Return True if any of the given `exclusions` is found inside the
    `trigger_id` of the command that caused the file to be opened.
    """
    trigger_id = trigger_id or ''
    return any(re.search(rule, trigger_id) for rule in exclusions)

### Debouncing

class DebounceGuard(object):
    """
    Suppresses an activation that follows the previous one too quickly.

    Some hosts run their file loading hook twice for a single logical open.
    The guard permits the first call and silently refuses the second one, as
    long as it arrives within `interval` seconds.
    """
    def __init__(self, interval=DEBOUNCE_INTERVAL, last_activation=None):
        """
        `last_activation` is the time of the previous activation. `None`
        leaves the guard cold, so that the next activation is permitted
        regardless of its time.
        """
        self.interval = interval
        self.last_activation = last_activation

    def try_activate(self, now):
        """
        Return True and remember `now` as the time of the last activation,
        if more than `interval` seconds have passed since then. Otherwise
        return False and leave the remembered time unchanged.
        """
        last = self.last_activation
        if last is not None and now - last <= self.interval:
            return False
        self.last_activation = now
        return True

### Terminal front ends for user interaction

def echo(message, stream=None):
    """
    Show `message` on `stream` (`sys.stderr` by default).
    """
    stream = sys.stderr if stream is None else stream
    stream.write(message + '\n')
    stream.flush()

def ask_yes_no(question, read=input):
    """
    Ask `question` until the user answers with "y" or "n" and return
    whether the answer was "y". `read` is called with the prompt.
    """
    prompt = question + '(y or n) '
    while True:
        answer = read(prompt).strip().lower()
        if answer in ('y', 'yes'):
            return True
        if answer in ('n', 'no'):
            return False
        prompt = 'Please answer y or n.  ' + question + '(y or n) '

### Dispatching

class Dispatcher(object):
    """
    Decides for each opened file whether an external program should take
    care of it instead of the host, and launches that program if so.
    """
    def __init__(self, configuration, launcher=None, guard=None,
                 confirm=ask_yes_no, notify=echo, recent_files=None,
                 clock=time.monotonic):
        """
        `configuration` must provide `associations`, `confirm`, `exclusions`
        and `enabled` (see `openwith.settings.Configuration`). The launcher
        defaults to the one suitable for the current platform. `confirm` is
        called with a question and must return a boolean, `notify` is called
        with a message after a successful launch. `recent_files` may be an
        object with an `add_file()`-method or `None`.
        """
        if launcher is None:
            launcher = get_default_launcher()
        self.configuration = configuration
        self.enabled = configuration.enabled
        self.launcher = launcher
        self.guard = DebounceGuard() if guard is None else guard
        self.confirm = confirm
        self.notify = notify
        self.recent_files = recent_files
        self.clock = clock

    def reload(self, configuration):
        """
        Replace the current configuration with `configuration` as a whole.
        The mode flag and the debounce state are kept: `enabled` of the new
        configuration is not applied, since switching the mode also changes
        the dispatcher's registration (see `openwith.hooks.set_mode()`).
        """
        self.configuration = configuration

    def __call__(self, event):
        return self.handle(event)

    def handle(self, event):
        """
        Handle the given `FileOpenEvent`. Return `HANDLED` if an external
        program was launched for the event's path, meaning that the caller
        must not open the file on its own. Otherwise return `NOT_HANDLED`.

        Errors raised while launching the program are not caught.
        """
        path = event.path
        if not self.enabled:
            logger.debug('Disabled, ignoring {0!r}'.format(path))
            return NOT_HANDLED
        target = event.target
        if target is not None and (target.is_modified() or
                                   not target.is_empty()):
            logger.debug('Target for {0!r} is not pristine'.format(path))
            return NOT_HANDLED
        if not self.guard.try_activate(self.clock()):
            logger.debug('Ignoring repeated activation for {0!r}'.format(path))
            return NOT_HANDLED
        config = self.configuration
        if is_excluded(event.trigger_id, config.exclusions):
            logger.debug('Command {0!r} is excluded'.format(event.trigger_id))
            return NOT_HANDLED
        association = resolve(path, config.associations)
        if association is NO_MATCH:
            return NOT_HANDLED
        invocation = get_invocation(association, path)
        if config.confirm and not self.confirm(self.get_question(invocation)):
            logger.debug('Declined to open {0!r}'.format(path))
            return NOT_HANDLED
        logger.info('Launching {0} for {1!r}'.format(invocation.program, path))
        self.launcher.launch(invocation.program, invocation.arguments, path)
        if target is not None:
            target.discard()
        if self.recent_files is not None:
            self.recent_files.add_file(path)
        self.notify('Opened {0} in external program'.format(path))
        return HANDLED

    @staticmethod
    def get_question(invocation):
        return '{0} {1}? '.format(invocation.program,
                                  ' '.join(invocation.arguments))
