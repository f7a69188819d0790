# -*- coding: utf-8 -*-
# vim:et sts=4 sw=4
#
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
Reading and matching the list of GTK input method modules

The GTK IM module registry file (usually something like
/usr/lib64/gtk-3.0/3.0.0/immodules.cache) looks like this:

    # GTK+ Input Method Modules file
    # Automatically generated file, do not edit
    "/usr/lib64/gtk-3.0/3.0.0/immodules/im-ibus.so"
    "ibus" "IBus (Intelligent Input Bus)" "ibus" "/usr/share/locale" "ja:ko:zh:*"

    "/usr/lib64/gtk-3.0/3.0.0/immodules/im-xim.so"
    "xim" "X Input Method" "gtk30" "/usr/share/locale" "ko:ja:th:zh"

Only the lines describing a module (those with more than one quoted
field) are interesting here, and of those only the first two fields,
the identifier and the human readable description.
'''

from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Iterable
import re
import bisect
import threading
import unicodedata
import logging

LOGGER = logging.getLogger('gtk-im-switcher')

# A quoted field may contain backslash escaped characters, for
# example a description like "Foo \"bar\"".
QUOTED_FIELD_PATTERN = re.compile(r'"((?:[^"\\]|\\.)*)"')

TRANS_TABLE = {
    ord('ẞ'): 'SS',
    ord('ß'): 'ss',
    ord('Ø'): 'O',
    ord('ø'): 'o',
    ord('Æ'): 'AE',
    ord('æ'): 'ae',
    ord('Œ'): 'OE',
    ord('œ'): 'oe',
    ord('Ł'): 'L',
    ord('ł'): 'l',
}

class ImModule(NamedTuple):
    '''An input method module as listed in the GTK IM module file'''
    identifier: str
    description: str

def _unescape(field: str) -> str:
    return re.sub(r'\\(.)', r'\1', field)

def parse_im_modules(text: str) -> List[ImModule]:
    '''Parses the contents of a GTK IM module file

    :param text: The contents of the file
    :return: The input method modules found, sorted by identifier.
             If the same identifier is listed more than once,
             the first one listed wins.

    Examples:

    >>> parse_im_modules('"/usr/lib/im-xim.so"\\n"xim" "X Input Method" "gtk30"')
    [ImModule(identifier='xim', description='X Input Method')]

    >>> parse_im_modules('# comment\\n\\n"ibus" "IBus" "ibus"\\n"cedilla" "Cedilla"')
    [ImModule(identifier='cedilla', description='Cedilla'), ImModule(identifier='ibus', description='IBus')]

    >>> parse_im_modules('"only-one-field"\\nnot "quoted" "first"')
    []
    '''
    modules: List[ImModule] = []
    seen = set()
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith('"'):
            # Comments, empty lines and garbage
            continue
        fields = QUOTED_FIELD_PATTERN.findall(line)
        if len(fields) < 2:
            # The line with the path of the shared library of a module
            continue
        identifier = _unescape(fields[0]).strip()
        if not identifier:
            continue
        if identifier in seen:
            LOGGER.debug('Duplicate input method module “%s” ignored.',
                         identifier)
            continue
        seen.add(identifier)
        modules.append(ImModule(identifier, _unescape(fields[1])))
    return sorted(modules)

def read_im_modules(path: str) -> List[ImModule]:
    '''Reads the input method modules from a GTK IM module file

    :param path: Full path of the GTK IM module file
    :return: The input method modules found, sorted by identifier.
             An empty list if the file cannot be read.
    '''
    if not path:
        LOGGER.warning('No GTK IM module file.')
        return []
    try:
        with open(path, mode='r', encoding='UTF-8') as im_module_file:
            text = im_module_file.read()
    except (FileNotFoundError, PermissionError, IsADirectoryError) as error:
        LOGGER.warning('Cannot read GTK IM module file %s: %s: %s',
                       path, error.__class__.__name__, error)
        return []
    except (OSError, UnicodeDecodeError) as error:
        LOGGER.exception('Unexpected error reading %s: %s: %s',
                         path, error.__class__.__name__, error)
        return []
    modules = parse_im_modules(text)
    LOGGER.info('%s input method modules found in %s', len(modules), path)
    return modules

def find_im_module(modules: List[ImModule], identifier: str) -> int:
    '''Finds the index of an input method module in a sorted list

    :param modules: Input method modules sorted by identifier
    :param identifier: The identifier to look for. Leading and
                       trailing white space is ignored.
    :return: The index of the module in the list, -1 if not found.

    Examples:

    >>> modules = [ImModule('ibus', 'IBus'), ImModule('xim', 'X')]
    >>> find_im_module(modules, ' xim ')
    1
    >>> find_im_module(modules, 'fcitx')
    -1
    '''
    identifier = identifier.strip()
    # The empty description sorts before any other description of
    # the same identifier.
    index = bisect.bisect_left(modules, ImModule(identifier, ''))
    if index < len(modules) and modules[index].identifier == identifier:
        return index
    return -1

def format_im_module(module: ImModule) -> str:
    '''Returns the text to display for an input method module

    >>> format_im_module(ImModule('xim', 'X Input Method'))
    'xim: X Input Method'
    '''
    return f'{module.identifier}: {module.description}'

def text_to_match(text: str) -> str:
    '''Normalizes a text for matching

    Case, spaces and accents are ignored.

    >>> text_to_match('Système Ø Input')
    'systemeoinput'
    '''
    text = ''.join([
        x for x in unicodedata.normalize('NFKD', text)
        if unicodedata.category(x) != 'Mn']).translate(TRANS_TABLE)
    return text.replace(' ', '').casefold()

def im_module_matches(module: ImModule, filter_text: str) -> bool:
    '''Checks whether an input method module matches a filter text

    :param module: The input method module
    :param filter_text: The text typed by the user. An empty
                        filter text matches all modules.
    '''
    filter_text = text_to_match(filter_text)
    if not filter_text:
        return True
    return filter_text in text_to_match(format_im_module(module))

def filter_im_modules(
        modules: Iterable[ImModule], filter_text: str) -> List[ImModule]:
    '''Returns the input method modules matching a filter text'''
    return [module for module in modules
            if im_module_matches(module, filter_text)]

class CurrentImModule:
    '''The name of the currently used input method module

    The value is shared between the callback which is notified
    when the “im-module” property of the entry changes and the
    callback for the selection of a row in the list.
    '''
    def __init__(self, im_module: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._im_module = ''
        if im_module:
            self._im_module = im_module.strip()

    def get(self) -> str:
        '''Returns the name of the current input method module'''
        with self._lock:
            return self._im_module

    def set(self, im_module: Optional[str]) -> bool:
        '''Sets the name of the current input method module

        :param im_module: The new name, leading and trailing white
                          space is removed. None is the same as ''.
        :return: True if the value has changed, False if not.
        '''
        if im_module is None:
            im_module = ''
        im_module = im_module.strip()
        with self._lock:
            if im_module == self._im_module:
                return False
            self._im_module = im_module
            return True

    def __str__(self) -> str:
        return self.get()
