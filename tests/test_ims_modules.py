#!/usr/bin/python3

# gtk-im-switcher - A dialog to switch the GTK input method module
#
# Copyright (c) 2025 Mike FABIAN <mfabian@redhat.com>
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>

'''
This file implements test cases for reading and matching the list
of input method modules in ims_modules.py.
'''

import sys
import os
import doctest
import logging
import tempfile
import threading
import unittest

LOGGER = logging.getLogger('gtk-im-switcher')

# pylint: disable=wrong-import-position
sys.path.insert(
    0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '../switcher'))
import ims_modules # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

# pylint: disable=missing-class-docstring
# pylint: disable=missing-function-docstring

IM_MODULES_CACHE = '''\
# GTK+ Input Method Modules file
# Automatically generated file, do not edit
# Created by /usr/bin/gtk-query-immodules-3.0-64 from gtk+-3.24.43
#
# ModulesPath = /usr/lib64/gtk-3.0/3.0.0/immodules
#
"/usr/lib64/gtk-3.0/3.0.0/immodules/im-xim.so"
"xim" "X Input Method" "gtk30" "/usr/share/locale" "ko:ja:th:zh"

"/usr/lib64/gtk-3.0/3.0.0/immodules/im-ibus.so"
"ibus" "IBus (Intelligent Input Bus)" "ibus" "/usr/share/locale" "ja:ko:zh:*"

"/usr/lib64/gtk-3.0/3.0.0/immodules/im-cedilla.so"
"cedilla" "Cedilla" "gtk30" "/usr/share/locale" "az:ca:co:fr:gv:oc:pt:sq:tr:wa"

"/usr/lib64/gtk-3.0/3.0.0/immodules/im-fcitx5.so"
"fcitx" "Fcitx5 (Flexible Input Method Framework5)" "fcitx5" "/usr/share/locale" "ja:ko:zh:*"
"fcitx5" "Fcitx5 (Flexible Input Method Framework5)" "fcitx5" "/usr/share/locale" "ja:ko:zh:*"

'''

class ImModulesTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tempdir = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        self._tempdir.cleanup()

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_parse_sorted_by_identifier(self) -> None:
        modules = ims_modules.parse_im_modules(IM_MODULES_CACHE)
        self.assertEqual(
            ['cedilla', 'fcitx', 'fcitx5', 'ibus', 'xim'],
            [module.identifier for module in modules])
        self.assertEqual(
            ims_modules.ImModule('ibus', 'IBus (Intelligent Input Bus)'),
            modules[3])

    def test_parse_three_fields(self) -> None:
        self.assertEqual(
            [ims_modules.ImModule('thai-broken', 'Thai-Lao'),
             ims_modules.ImModule('wayland', 'Wayland')],
            ims_modules.parse_im_modules(
                '"wayland" "Wayland" "*"\n'
                '"thai-broken" "Thai-Lao" "th:lo"\n'))

    def test_parse_two_fields(self) -> None:
        self.assertEqual(
            [ims_modules.ImModule('xim', 'X Input Method')],
            ims_modules.parse_im_modules('"xim" "X Input Method"'))

    def test_parse_ignores_garbage(self) -> None:
        self.assertEqual(
            [],
            ims_modules.parse_im_modules(
                '# "commented" "out"\n'
                '\n'
                '"/usr/lib64/gtk-3.0/3.0.0/immodules/im-xim.so"\n'
                'xim "X Input Method"\n'
                '"" "No identifier"\n'))

    def test_parse_escaped_quotes(self) -> None:
        self.assertEqual(
            [ims_modules.ImModule('quote', 'Say "hello"')],
            ims_modules.parse_im_modules(
                '"quote" "Say \\"hello\\"" "gtk30" "" "*"'))

    def test_parse_duplicates_first_wins(self) -> None:
        modules = ims_modules.parse_im_modules(
            '"xim" "First"\n"xim" "Second"\n')
        self.assertEqual([ims_modules.ImModule('xim', 'First')], modules)

    def test_parse_leading_white_space(self) -> None:
        self.assertEqual(
            [ims_modules.ImModule('xim', 'X Input Method')],
            ims_modules.parse_im_modules('   "xim" "X Input Method"   \n'))
        self.assertEqual(
            [ims_modules.ImModule('cedilla', 'Cedilla'),
             ims_modules.ImModule('ibus', 'IBus')],
            ims_modules.parse_im_modules(
                '\t"/usr/lib64/im-ibus.so"\n'
                '\t"ibus" "IBus" "ibus"\n'
                '  # "comment" "indented"\n'
                ' \t "cedilla" "Cedilla"\n'))

    def test_read_im_modules(self) -> None:
        path = os.path.join(self._tempdir.name, 'immodules.cache')
        with open(path, mode='w', encoding='UTF-8') as cache_file:
            cache_file.write(IM_MODULES_CACHE)
        modules = ims_modules.read_im_modules(path)
        self.assertEqual(5, len(modules))
        self.assertEqual('cedilla', modules[0].identifier)

    def test_read_im_modules_missing_file(self) -> None:
        self.assertEqual(
            [],
            ims_modules.read_im_modules(
                os.path.join(self._tempdir.name, 'does-not-exist')))

    def test_read_im_modules_empty_path(self) -> None:
        self.assertEqual([], ims_modules.read_im_modules(''))

    def test_read_im_modules_directory(self) -> None:
        self.assertEqual([], ims_modules.read_im_modules(self._tempdir.name))

    def test_read_im_modules_not_utf8(self) -> None:
        path = os.path.join(self._tempdir.name, 'immodules.cache')
        with open(path, mode='wb') as cache_file:
            cache_file.write(b'"xim" "\xff\xfe\xfa"\n')
        self.assertEqual([], ims_modules.read_im_modules(path))

    def test_find_im_module(self) -> None:
        modules = ims_modules.parse_im_modules(IM_MODULES_CACHE)
        self.assertEqual(0, ims_modules.find_im_module(modules, 'cedilla'))
        self.assertEqual(3, ims_modules.find_im_module(modules, ' ibus\t'))
        self.assertEqual(4, ims_modules.find_im_module(modules, 'xim'))
        self.assertEqual(-1, ims_modules.find_im_module(modules, 'fcitx4'))
        self.assertEqual(-1, ims_modules.find_im_module(modules, ''))
        self.assertEqual(-1, ims_modules.find_im_module([], 'xim'))

    def test_find_im_module_prefixes(self) -> None:
        modules = [
            ims_modules.ImModule('ibus', 'IBus'),
            ims_modules.ImModule('ibus-wayland', 'IBus Wayland'),
        ]
        self.assertEqual(0, ims_modules.find_im_module(modules, 'ibus'))
        self.assertEqual(
            1, ims_modules.find_im_module(modules, 'ibus-wayland'))
        self.assertEqual(-1, ims_modules.find_im_module(modules, 'ibu'))
        self.assertEqual(-1, ims_modules.find_im_module(modules, 'ibus-'))

    def test_find_im_module_does_not_scan(self) -> None:
        class CountingList(list):
            def __init__(self, *args) -> None:
                super().__init__(*args)
                self.iterations = 0
                self.item_accesses = 0

            def __iter__(self):
                self.iterations += 1
                return super().__iter__()

            def __getitem__(self, index):
                self.item_accesses += 1
                return super().__getitem__(index)

        modules = CountingList(
            ims_modules.ImModule(f'im{number:04d}', f'Module {number}')
            for number in range(1024))
        self.assertEqual(700, ims_modules.find_im_module(modules, 'im0700'))
        self.assertEqual(0, modules.iterations)
        self.assertLessEqual(modules.item_accesses, 12)
        modules.item_accesses = 0
        self.assertEqual(-1, ims_modules.find_im_module(modules, 'im9999'))
        self.assertEqual(0, modules.iterations)
        self.assertLessEqual(modules.item_accesses, 12)

    def test_format_im_module(self) -> None:
        self.assertEqual(
            'cedilla: Cedilla',
            ims_modules.format_im_module(
                ims_modules.ImModule('cedilla', 'Cedilla')))

    def test_im_module_matches(self) -> None:
        module = ims_modules.ImModule('xim', 'X Input Method')
        self.assertTrue(ims_modules.im_module_matches(module, ''))
        self.assertTrue(ims_modules.im_module_matches(module, '   '))
        self.assertTrue(ims_modules.im_module_matches(module, 'xim'))
        self.assertTrue(ims_modules.im_module_matches(module, 'XIM'))
        self.assertTrue(ims_modules.im_module_matches(module, 'inputmethod'))
        self.assertTrue(ims_modules.im_module_matches(module, 'Input Méthod'))
        self.assertTrue(ims_modules.im_module_matches(module, 'm: x'))
        self.assertFalse(ims_modules.im_module_matches(module, 'ibus'))

    def test_filter_im_modules(self) -> None:
        modules = ims_modules.parse_im_modules(IM_MODULES_CACHE)
        self.assertEqual(
            ['fcitx', 'fcitx5'],
            [module.identifier
             for module in ims_modules.filter_im_modules(modules, 'fcitx')])
        self.assertEqual(
            ['fcitx', 'fcitx5', 'ibus', 'xim'],
            [module.identifier
             for module in ims_modules.filter_im_modules(modules, 'input')])
        self.assertEqual(
            modules, ims_modules.filter_im_modules(modules, ''))
        self.assertEqual(
            [], ims_modules.filter_im_modules(modules, 'anthy'))

    def test_current_im_module(self) -> None:
        current = ims_modules.CurrentImModule()
        self.assertEqual('', current.get())
        self.assertTrue(current.set(' ibus '))
        self.assertEqual('ibus', current.get())
        self.assertEqual('ibus', str(current))
        self.assertFalse(current.set('ibus'))
        self.assertTrue(current.set(None))
        self.assertEqual('', current.get())
        self.assertFalse(current.set(''))
        self.assertEqual('xim', ims_modules.CurrentImModule('xim ').get())

    def test_current_im_module_threads(self) -> None:
        current = ims_modules.CurrentImModule()
        changes = []
        def switch(im_module: str) -> None:
            for _i in range(100):
                if current.set(im_module):
                    changes.append(im_module)
        threads = [threading.Thread(target=switch, args=(name,))
                   for name in ('ibus', 'xim')]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertIn(current.get(), ('ibus', 'xim'))
        self.assertTrue(changes)

    def test_doctests(self) -> None:
        (failed, _attempted) = doctest.testmod(ims_modules)
        self.assertEqual(0, failed)

if __name__ == '__main__':
    LOG_HANDLER = logging.StreamHandler(stream=sys.stderr)
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.addHandler(LOG_HANDLER)
    unittest.main()
