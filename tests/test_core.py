import io
import re
import unittest

from openwith.core import (
    Association,
    DebounceGuard,
    Dispatcher,
    FILE,
    FileOpenEvent,
    HANDLED,
    NOT_HANDLED,
    NO_MATCH,
    ResolvedInvocation,
    ask_yes_no,
    echo,
    get_invocation,
    is_excluded,
    resolve,
    substitute_arguments,
)
from openwith.hooks import Buffer, RecentFiles

from tests.helpers import FailingLauncher, FakeClock, FakeLauncher, make_configuration


class ResolveTests(unittest.TestCase):
    def test_first_match_in_table_order_wins(self):
        general = Association(r'\.tar', 'file-roller', (FILE,))
        specific = Association(r'\.tar\.gz$', 'tar', ('-xzf', FILE))
        self.assertIs(resolve('backup.tar.gz', [general, specific]), general)
        self.assertIs(resolve('backup.tar.gz', [specific, general]), specific)

    def test_pattern_matches_anywhere_unless_anchored(self):
        loose = Association('mp3', 'xmms', (FILE,))
        anchored = Association(r'\.mp3$', 'xmms', (FILE,))
        self.assertIs(resolve('/music/mp3s/readme.txt', [loose]), loose)
        self.assertIs(resolve('/music/mp3s/readme.txt', [anchored]), NO_MATCH)

    def test_compiled_patterns_are_accepted(self):
        association = Association(re.compile(r'\.png$'), 'display', (FILE,))
        self.assertIs(resolve('shot.png', [association]), association)

    def test_no_match_against_default_table(self):
        result = resolve('notes.txt', make_configuration().associations)
        self.assertIs(result, NO_MATCH)
        self.assertFalse(result)

    def test_default_table(self):
        table = make_configuration().associations
        self.assertEqual(resolve('/a/song.mp3', table).program, 'xmms')
        self.assertEqual(resolve('/a/b.avi', table).program, 'mplayer')
        self.assertEqual(resolve('/a/b.mpeg', table).program, 'mplayer')
        self.assertEqual(resolve('/a/b.jpg', table).program, 'display')
        self.assertIs(resolve('/a/b.avi.txt', table), NO_MATCH)


class SubstitutionTests(unittest.TestCase):
    def test_placeholder_replaced_literals_kept(self):
        self.assertEqual(substitute_arguments(['-idx', FILE], '/a/b.avi'),
                         ['-idx', '/a/b.avi'])

    def test_every_placeholder_replaced(self):
        template = (FILE, '--', FILE)
        self.assertEqual(substitute_arguments(template, 'x y.pdf'),
                         ['x y.pdf', '--', 'x y.pdf'])

    def test_literal_equal_to_placeholder_name_untouched(self):
        self.assertEqual(substitute_arguments(['FILE', '%f'], 'a.mp3'),
                         ['FILE', '%f'])

    def test_get_invocation(self):
        association = Association(r'\.avi$', 'mplayer', ('-idx', FILE))
        self.assertEqual(get_invocation(association, '/a/b.avi'),
                         ResolvedInvocation('mplayer', ['-idx', '/a/b.avi']))


class ExclusionTests(unittest.TestCase):
    def test_any_rule_matching_excludes(self):
        rules = [re.compile('^dired-'), 'find-alternate']
        self.assertTrue(is_excluded('dired-find-file', rules))
        self.assertTrue(is_excluded('my-find-alternate-file', rules))
        self.assertFalse(is_excluded('find-file', rules))

    def test_missing_trigger(self):
        self.assertFalse(is_excluded(None, ['dired']))
        self.assertFalse(is_excluded('dired', []))


class DebounceGuardTests(unittest.TestCase):
    def test_cold_guard_permits(self):
        guard = DebounceGuard()
        self.assertTrue(guard.try_activate(5.0))
        self.assertEqual(guard.last_activation, 5.0)

    def test_refusal_keeps_timestamp(self):
        guard = DebounceGuard(last_activation=10.0)
        self.assertFalse(guard.try_activate(11.0))
        self.assertFalse(guard.try_activate(12.0))
        self.assertEqual(guard.last_activation, 10.0)
        self.assertTrue(guard.try_activate(12.5))
        self.assertEqual(guard.last_activation, 12.5)


class DispatcherTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.launcher = FakeLauncher()
        self.messages = []
        self.questions = []
        self.answer = True

    def _confirm(self, question):
        self.questions.append(question)
        return self.answer

    def make_dispatcher(self, **kwargs):
        configuration = make_configuration(**kwargs)
        return Dispatcher(configuration, launcher=self.launcher,
                          confirm=self._confirm, notify=self.messages.append,
                          clock=self.clock)

    def test_end_to_end_pdf(self):
        dispatcher = self.make_dispatcher(
            associations=[Association(r'\.pdf$', 'acroread', (FILE,))])
        result = dispatcher.handle(FileOpenEvent('report.pdf', 'find-file'))
        self.assertEqual(result, HANDLED)
        self.assertEqual(self.launcher.calls,
                         [('acroread', ['report.pdf'], 'report.pdf')])
        self.assertEqual(self.messages,
                         ['Opened report.pdf in external program'])
        self.assertEqual(self.questions, [])

    def test_no_match_is_not_handled(self):
        dispatcher = self.make_dispatcher()
        result = dispatcher.handle(FileOpenEvent('notes.txt', 'find-file'))
        self.assertEqual(result, NOT_HANDLED)
        self.assertEqual(self.launcher.calls, [])
        self.assertEqual(self.messages, [])

    def test_repeated_call_within_interval_is_ignored(self):
        dispatcher = self.make_dispatcher()
        event = FileOpenEvent('/a/b.avi', 'find-file')
        self.assertEqual(dispatcher.handle(event), HANDLED)
        self.clock.advance(1.5)
        self.assertEqual(dispatcher.handle(event), NOT_HANDLED)
        self.assertEqual(len(self.launcher.calls), 1)

    def test_calls_spaced_apart_are_both_handled(self):
        dispatcher = self.make_dispatcher()
        event = FileOpenEvent('/a/b.avi', 'find-file')
        self.assertEqual(dispatcher.handle(event), HANDLED)
        self.clock.advance(3)
        self.assertEqual(dispatcher.handle(event), HANDLED)
        self.assertEqual(self.launcher.calls,
                         [('mplayer', ['-idx', '/a/b.avi'], '/a/b.avi')] * 2)

    def test_exclusion_wins_over_matching_pattern(self):
        dispatcher = self.make_dispatcher(exclusions=[re.compile('^dired-')])
        result = dispatcher.handle(FileOpenEvent('/a/b.avi', 'dired-find-file'))
        self.assertEqual(result, NOT_HANDLED)
        self.assertEqual(self.launcher.calls, [])

    def test_declined_confirmation_launches_nothing(self):
        dispatcher = self.make_dispatcher(confirm=True)
        self.answer = False
        result = dispatcher.handle(FileOpenEvent('/a/b.avi', 'find-file'))
        self.assertEqual(result, NOT_HANDLED)
        self.assertEqual(self.questions, ['mplayer -idx /a/b.avi? '])
        self.assertEqual(self.launcher.calls, [])
        self.assertEqual(dispatcher.guard.last_activation, self.clock.now)

    def test_accepted_confirmation_launches(self):
        dispatcher = self.make_dispatcher(confirm=True)
        result = dispatcher.handle(FileOpenEvent('/a/song.mp3', 'find-file'))
        self.assertEqual(result, HANDLED)
        self.assertEqual(self.questions, ['xmms /a/song.mp3? '])

    def test_disabled_dispatcher_does_nothing(self):
        dispatcher = self.make_dispatcher(enabled=False)
        result = dispatcher.handle(FileOpenEvent('/a/b.avi', 'find-file'))
        self.assertEqual(result, NOT_HANDLED)
        self.assertIsNone(dispatcher.guard.last_activation)

    def test_target_not_pristine(self):
        dispatcher = self.make_dispatcher()
        for target in (Buffer('b.avi', modified=True),
                       Buffer('b.avi', contents='data')):
            event = FileOpenEvent('/a/b.avi', 'find-file', target)
            self.assertEqual(dispatcher.handle(event), NOT_HANDLED)
            self.assertFalse(target.discarded)
        self.assertIsNone(dispatcher.guard.last_activation)

    def test_post_launch_side_effects(self):
        recent = RecentFiles()
        dispatcher = self.make_dispatcher()
        dispatcher.recent_files = recent
        target = Buffer('b.avi')
        result = dispatcher(FileOpenEvent('/a/b.avi', 'find-file', target))
        self.assertEqual(result, HANDLED)
        self.assertTrue(target.discarded)
        self.assertEqual(list(recent), ['/a/b.avi'])

    def test_reload_keeps_mode_flag(self):
        dispatcher = self.make_dispatcher()
        dispatcher.reload(make_configuration(enabled=False))
        self.assertTrue(dispatcher.enabled)
        self.assertEqual(dispatcher.handle(FileOpenEvent('/a/b.avi', 'find-file')),
                         HANDLED)

    def test_launch_error_propagates(self):
        dispatcher = Dispatcher(make_configuration(), launcher=FailingLauncher(),
                                notify=self.messages.append, clock=self.clock)
        target = Buffer('b.avi')
        with self.assertRaises(OSError):
            dispatcher.handle(FileOpenEvent('/a/b.avi', 'find-file', target))
        self.assertFalse(target.discarded)
        self.assertEqual(self.messages, [])

    def test_reload_replaces_configuration(self):
        dispatcher = self.make_dispatcher()
        dispatcher.reload(make_configuration(
            associations=[Association(r'\.txt$', 'gedit', (FILE,))]))
        result = dispatcher.handle(FileOpenEvent('notes.txt', 'find-file'))
        self.assertEqual(result, HANDLED)
        self.assertEqual(self.launcher.calls,
                         [('gedit', ['notes.txt'], 'notes.txt')])


class TerminalFrontEndTests(unittest.TestCase):
    def test_echo(self):
        stream = io.StringIO()
        echo('Opened a.mp3 in external program', stream)
        self.assertEqual(stream.getvalue(),
                         'Opened a.mp3 in external program\n')

    def test_ask_yes_no_repeats_until_answered(self):
        answers = iter(['maybe', ' Y '])
        prompts = []

        def read(prompt):
            prompts.append(prompt)
            return next(answers)

        self.assertTrue(ask_yes_no('xmms a.mp3? ', read))
        self.assertEqual(prompts, ['xmms a.mp3? (y or n) ',
                                   'Please answer y or n.  xmms a.mp3? (y or n) '])

    def test_ask_yes_no_negative(self):
        self.assertFalse(ask_yes_no('xmms a.mp3? ', lambda prompt: 'n'))


if __name__ == '__main__':
    unittest.main()
