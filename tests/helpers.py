from openwith.core import DEFAULT_ASSOCIATIONS
from openwith.settings import Configuration


def make_configuration(associations=DEFAULT_ASSOCIATIONS, confirm=False,
                       exclusions=(), enabled=True, launcher='auto',
                       starter=None):
    return Configuration(tuple(associations), confirm, tuple(exclusions),
                         enabled, launcher, starter)


class FakeClock(object):
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeLauncher(object):
    def __init__(self):
        self.calls = []

    def launch(self, program, arguments, path):
        self.calls.append((program, list(arguments), path))


class FailingLauncher(object):
    def launch(self, program, arguments, path):
        raise OSError('No such file or directory: {0!r}'.format(program))
