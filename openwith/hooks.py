"""
Collaborators for wiring a dispatcher into a host application.

A host keeps a `HandlerChain` and calls `HandlerChain.open_file()` whenever
a file is about to be opened. The dispatcher hooks into that chain while its
mode is switched on.
"""
import re

# openwith package
from . import logger, settings
from .core import Dispatcher, FileOpenEvent, HANDLED, NOT_HANDLED
from .launchers import get_default_launcher

class Buffer(object):
    """
    Target that receives the contents of a file opened by the host.
    """
    def __init__(self, name, contents='', modified=False):
        self.name = name
        self.contents = contents
        self.modified = modified
        self.discarded = False

    def is_modified(self):
        return self.modified

    def is_empty(self):
        return not self.contents

    def discard(self):
        """
        Throw the buffer away, so that nothing is loaded into it anymore.
        """
        self.contents = ''
        self.modified = False
        self.discarded = True

class RecentFiles(object):
    """
    List of recently opened paths, most recent first.
    """
    def __init__(self, max_items=20):
        self.max_items = max_items
        self.files = []

    def add_file(self, path):
        """
        Put `path` in front of the list. An existing entry for `path` is
        moved rather than duplicated and the oldest entries are dropped when
        the list grows beyond `max_items`.
        """
        if path in self.files:
            self.files.remove(path)
        self.files.insert(0, path)
        del self.files[self.max_items:]

    def __iter__(self):
        return iter(self.files)

    def __len__(self):
        return len(self.files)

class HandlerChain(object):
    """
    Ordered table of `(pattern, handler)`-pairs consulted for opened files.

    Each handler whose pattern is found inside the path is called with a
    `FileOpenEvent`, in table order. The first one returning `HANDLED` ends
    the chain. When none does, `default_open` is called with the event.
    """
    def __init__(self, default_open=None):
        self.handlers = []
        self.default_open = default_open

    def register_hook(self, handler, pattern=''):
        """
        Put `handler` in front of the chain. The empty default pattern makes
        it apply to every path. Registering the same handler again has no
        effect.
        """
        if not self.is_registered(handler):
            self.handlers.insert(0, (pattern, handler))

    def unregister_hook(self, handler):
        self.handlers = [(pattern, registered)
                         for pattern, registered in self.handlers
                         if registered is not handler]

    def is_registered(self, handler):
        return any(registered is handler for _, registered in self.handlers)

    def open_file(self, path, trigger_id='', target=None):
        """
        Offer the file at `path` to the registered handlers and return the
        outcome. `trigger_id` names the command that caused the open, while
        `target` is the buffer which would receive the file's contents.
        """
        event = FileOpenEvent(path, trigger_id, target)
        for pattern, handler in list(self.handlers):
            if re.search(pattern, path) and handler(event) == HANDLED:
                return HANDLED
        if self.default_open is not None:
            self.default_open(event)
        return NOT_HANDLED

def set_mode(chain, dispatcher, flag):
    """
    Switch `dispatcher` on or off according to `flag`. This also registers
    the dispatcher with `chain` or removes it from there.
    """
    dispatcher.enabled = bool(flag)
    if dispatcher.enabled:
        chain.register_hook(dispatcher)
    else:
        chain.unregister_hook(dispatcher)
    logger.info('Mode {0}'.format('enabled' if flag else 'disabled'))

def install(chain, configuration=None, **kwargs):
    """
    Create a `Dispatcher` based on `configuration` and hook it into `chain`
    (if the configuration has it enabled). The configuration defaults to
    `settings.load_configuration()`. Remaining keyword arguments are passed
    to the dispatcher. Unless a `launcher` is among them, the configured
    kind of launcher is created. Return the dispatcher.
    """
    if configuration is None:
        configuration = settings.load_configuration()
    if 'launcher' not in kwargs:
        kwargs['launcher'] = get_default_launcher(
            starter=configuration.starter, kind=configuration.launcher)
    dispatcher = Dispatcher(configuration, **kwargs)
    set_mode(chain, dispatcher, configuration.enabled)
    return dispatcher
