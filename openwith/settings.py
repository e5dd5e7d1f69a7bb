"""
Configuration stuff.
"""
# Stdlib
from collections import namedtuple
import os
import re
import shlex
# 3rd party
from xdg.BaseDirectory import xdg_config_home
# openwith package
from . import logger
from .core import Association, DEFAULT_ASSOCIATIONS, FILE
from .launchers import LAUNCHER_KINDS

# Default configuration. Never changed at runtime: each load starts from a
# fresh copy of it.
DEFAULT_CONFIG = {
    'associations': DEFAULT_ASSOCIATIONS,
    'confirm': False,
    'enabled': True,
    'exclusions': (),
    'launcher': 'auto',
    'starter': None,
}

CONFIG_FILENAME = 'openwith.conf'

# Keys which may appear more than once inside a config file
LIST_KEYS = ('association', 'exclude')

# Keys which take a boolean word
BOOLEAN_KEYS = ('confirm', 'enabled')

# Keys taken as plain strings
STRING_KEYS = ('launcher', 'starter')

# Token inside an association's arguments, that stands for the file
FILE_TOKEN = '%f'

BOOLEAN_VALUES = {
    'yes': True, 'true': True, 'on': True, '1': True,
    'no': False, 'false': False, 'off': False, '0': False,
}

Configuration = namedtuple('Configuration',
                           'associations confirm exclusions enabled '
                           'launcher starter')
Configuration.__new__.__defaults__ = ('auto', None)
Configuration.__doc__ = """
Immutable snapshot of the settings a dispatcher works with. Patterns inside
`associations` and `exclusions` are compiled regular expressions.
"""

def load_configuration(configuration={}, filename=None):
    """
    Return a `Configuration` built from the default configuration, updated
    with the user's config file and after that with the given `configuration`
    dictionary (see `get_config()`). Each call starts from the defaults, so
    settings removed from the file since the previous call are gone. Invalid
    regular expressions raise `re.error`.
    """
    config = get_config(configuration, filename)
    if config['launcher'] not in LAUNCHER_KINDS:
        raise ValueError('Unknown launcher: {0!r}'.format(config['launcher']))
    associations = tuple(
        Association(re.compile(assoc.pattern), assoc.program,
                    tuple(assoc.template))
        for assoc in config['associations'])
    exclusions = tuple(re.compile(rule) for rule in config['exclusions'])
    return Configuration(associations, bool(config['confirm']), exclusions,
                         bool(config['enabled']), config['launcher'],
                         config['starter'] or None)

def get_config(configuration={}, filename=None):
    """
    Return a new dictionary holding the default configuration, updated with
    the result of `get_user_config()` and after that with the given
    `configuration`-dictionary.

    "Updating" means: If the same key exists in at least two dictionaries,
    then the latter one's value is used. Otherwise the key is just added.
    Thus, an empty dictionary will result in no change.
    """
    config = dict(DEFAULT_CONFIG)
    for cfg in (get_user_config(filename), configuration):
        config.update(cfg)
    return config

def get_user_config(filename=None):
    """
    Return the parsed contents of a configuration file, which is named with
    `filename`, as a dictionary, where the file is assumed to exist inside
    the user's "standard" configuration directory. In case that no such file
    could be found, an empty dictionary will be returned. If `filename` is
    `None`, the `CONFIG_FILENAME` is used.

    Note that the expected scheme inside the config file is explained in
    `iter_config_entries()` and `convert_entries()`, while the config file's
    path is retrieved by `get_config_path()`.
    """
    path = get_config_path(filename)
    if not os.path.exists(path):
        return {}
    logger.info('Found config file {0!r}'.format(path))
    return get_config_entries(path)

def get_config_path(filename=None):
    """
    Return a XDG-compliant path based on given `filename`. If `filename` is
    `None`, the `CONFIG_FILENAME` will be used.
    """
    if filename is None:
        filename = CONFIG_FILENAME
    if os.path.dirname(filename):
        raise ValueError('filename may not contain any path separator')
    return os.path.join(xdg_config_home, filename)

def get_config_entries(path):
    """
    Read a configuration file from the given path and return a dictionary,
    which contains the file's entries converted to their configuration values.
    """
    with open(path) as config_file:
        return convert_entries(iter_config_entries(config_file))

def iter_config_entries(lines):
    """
    Iterate over the given configuration lines, which may be either a file-like
    object or a list of strings and return a `(key, value)`-pair for each line.
    Parsing is done according to the following rules:

    Each line must use the scheme `key: value` to define an item. If a line
    contains multiple `:`-chars, then the first one disappears, as it is used
    as the separator, while the other ones will remain inside the value entry,
    which consequently means that only one item per line can be defined. Lines
    are read until a `#` appears, since that is interpreted as the beginning of
    a comment. Whitespace at the beginning or at the end of a line is ignored.
    The same goes for whitespace between key/value and separator. Empty lines
    are just ignored, while a line with non-whitespaced contents, which doesn't
    contain the separator, is an error. Note that keys and values will always
    be strings.
    """
    for index, line in enumerate(lines):
        code = line.split('#')[0].strip()
        if code:
            if not ':' in code:
                msg = 'Syntax error in line {0}: Expected a separator (`:`)'
                raise ValueError(msg.format(index + 1))
            key, value = code.split(':', 1)
            yield (key.strip(), value.strip())

def convert_entries(entries):
    """
    Turn the `(key, value)`-pairs of `iter_config_entries()` into a dictionary
    suitable for `get_config()`.

    `confirm` and `enabled` take a boolean word ("yes", "no", ...). Each
    `exclude` adds a regular expression for commands to ignore. Each
    `association` holds a pattern, a program and the program's arguments,
    split by shell rules, where `%f` stands for the file. The order of
    repeated keys is kept. If there are no `association` entries, the
    default associations are not touched. `launcher` chooses between "auto",
    "shell" and "native", while `starter` names the program used by the
    native launcher. Any other key is an error.
    """
    result = {}
    collected = dict((key, []) for key in LIST_KEYS)
    for key, value in entries:
        if key in LIST_KEYS:
            collected[key].append(value)
        elif key in BOOLEAN_KEYS:
            result[key] = parse_boolean(value)
        elif key in STRING_KEYS:
            result[key] = value
        else:
            raise ValueError('Unknown configuration key: {0!r}'.format(key))
    if collected['association']:
        result['associations'] = tuple(
            parse_association(value) for value in collected['association'])
    if collected['exclude']:
        result['exclusions'] = tuple(collected['exclude'])
    return result

def parse_boolean(value):
    try:
        return BOOLEAN_VALUES[value.lower()]
    except KeyError:
        raise ValueError('Not a boolean value: {0!r}'.format(value))

def parse_association(value):
    """
    Parse an association definition like `'\\.pdf$' acroread %f` and return
    the resulting `Association`.

    Values are split by shell rules, which would silently drop a backslash
    from an unquoted pattern (`\\.pdf$` becoming `.pdf$`). A pattern like
    that is therefore rejected: patterns containing backslashes must be
    put inside single quotes.
    """
    args = shlex.split(value)
    if len(args) < 2:
        msg = 'Association needs a pattern and a program: {0!r}'
        raise ValueError(msg.format(value))
    pattern, program = args[:2]
    raw_pattern = value.split(None, 1)[0]
    if '\\' in raw_pattern and raw_pattern[0] not in '\'"':
        msg = 'Pattern with backslashes must be quoted: {0!r}'
        raise ValueError(msg.format(raw_pattern))
    template = tuple(FILE if arg == FILE_TOKEN else arg for arg in args[2:])
    return Association(pattern, program, template)
