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
A small dialog to try and switch the GTK input method module.

Type the name of an input method module into the entry and press
Enter, or select one from the list, and the entry of the dialog
switches to that input method module.
'''

from typing import Any
from typing import List
from typing import Optional
from typing import Union
from typing import TYPE_CHECKING
import sys
import os
import signal
import argparse
import locale
import logging
import logging.handlers

# pylint: disable=wrong-import-position
from gi import require_version # type: ignore
require_version('GLib', '2.0')
from gi.repository import GLib # type: ignore

# set_prgname before importing other modules to show the name in warning
# messages when import modules are failed. E.g. Gtk.
GLib.set_application_name('IM Module Switcher')
GLib.set_prgname('gtk-im-switcher')

from ims_gtk import Gtk, Gdk # type: ignore
if TYPE_CHECKING:
    # These imports are only for type checkers (mypy). They must not be
    # executed at runtime because ims_gtk controls the Gtk/Gdk versions.
    # pylint: disable=reimported
    from gi.repository import Gtk, Gdk  # type: ignore
    # pylint: enable=reimported
import ims_modules
import ims_util
import ims_version
import ims_i18n
from ims_i18n import _
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('gtk-im-switcher')

DEBUG_LEVEL = int(0)
try:
    DEBUG_LEVEL = int(str(os.getenv('GTK_IM_SWITCHER_DEBUG_LEVEL')))
except (TypeError, ValueError):
    DEBUG_LEVEL = int(0)

def parse_args(argv: Optional[List[str]] = None) -> Any:
    '''
    Parse the command line arguments.
    '''
    parser = argparse.ArgumentParser(
        description='A dialog to switch the GTK input method module')
    parser.add_argument(
        '-f', '--im-module-file',
        nargs='?',
        type=str,
        action='store',
        default='',
        help=('Read the list of input method modules from this file '
              'instead of the GTK IM module file reported by Gtk. '
              'default: "%(default)s"'))
    parser.add_argument(
        '-l', '--list',
        action='store_true',
        default=False,
        help=('Print the available input method modules to stdout '
              'and exit. The current one is marked with “*”. '
              'default: %(default)s'))
    parser.add_argument(
        '-d', '--debug',
        action='store_true',
        default=False,
        help=('Print some debug output to stdout. '
              'default: %(default)s'))
    parser.add_argument(
        '--version',
        action='store_true',
        default=False,
        help=('Output version information and exit. '
              'default: %(default)s'))
    return parser.parse_args(argv)

class ImSwitcherDialog(Gtk.Dialog): # type: ignore
    '''
    User interface of the input method module switcher
    '''
    def __init__(self,
                 im_modules: Optional[List[ims_modules.ImModule]] = None,
                 im_module: Optional[str] = None) -> None:
        '''
        :param im_modules: The input method modules to list,
                           sorted by identifier
        :param im_module: The input method module to start with.
                          If None, the current one is looked up in
                          the environment and the Gtk settings.
        '''
        Gtk.Dialog.__init__(self, use_header_bar=0)
        self.set_name('ImSwitcher')
        self.set_decorated(False)
        self.set_resizable(False)
        self.set_skip_taskbar_hint(True)

        self._im_modules: List[ims_modules.ImModule] = []
        if im_modules:
            self._im_modules = list(im_modules)

        self._label = Gtk.Label()
        self._label.set_text(
            _('Type an input method module name and press Enter '
              'to switch input methods.'))
        self._label.set_halign(Gtk.Align.START)

        self._entry = Gtk.Entry()
        self._entry.set_activates_default(True)
        self._entry.set_editable(True)
        self._entry.set_has_frame(True)
        self._entry.set_can_focus(True)
        self._entry.set_hexpand(True)
        self._entry.set_vexpand(True)
        self._entry.set_placeholder_text(_('IM module name to switch'))
        self._entry.set_size_request(500, -1)

        self._listbox = Gtk.ListBox()
        self._listbox.set_selection_mode(Gtk.SelectionMode.SINGLE)
        self._listbox.set_filter_func(self._filter_listbox_row)

        if im_module is None:
            im_module = ims_util.current_im_module(self._entry)
        self._current_im_module = ims_modules.CurrentImModule(im_module)
        LOGGER.info('Current input method module: “%s”',
                    self._current_im_module)

        for index, module in enumerate(self._im_modules):
            row = Gtk.ListBoxRow()
            row.set_selectable(True)
            label = Gtk.Label()
            label.set_text(ims_modules.format_im_module(module))
            label.set_xalign(0)
            row.add(label) # pylint: disable=no-member
            self._listbox.insert(row, index)
            if module.identifier == self._current_im_module.get():
                self._listbox.select_row(row)

        content_area = self.get_content_area()
        content_area.add(self._label)
        content_area.add(self._entry)
        content_area.add(self._listbox)

        # Connect only now, the initial selection above must not
        # switch anything.
        self._listbox.connect('row-selected', self.on_row_selected)
        self._entry.connect('activate', self.on_entry_activate)
        self._entry.connect('changed', self.on_entry_changed)
        self._entry.connect('key-press-event', self.on_entry_key_press_event)
        self._entry.connect(
            'notify::im-module', self.on_entry_im_module_notify)

        self.show_all() # pylint: disable=no-member
        self._entry.grab_focus()

    @property
    def current_im_module(self) -> str:
        '''The name of the input method module used by the entry'''
        return self._current_im_module.get()

    @property
    def entry(self) -> Gtk.Entry:
        '''The entry to try the input method modules in'''
        return self._entry

    @property
    def label(self) -> Gtk.Label:
        '''The label showing instructions or the last key pressed'''
        return self._label

    @property
    def listbox(self) -> Gtk.ListBox:
        '''The list of input method modules'''
        return self._listbox

    def _filter_listbox_row(self, row: Gtk.ListBoxRow) -> bool:
        '''
        Called by the listbox to decide whether a row is shown

        :param row: The row to check
        :return: True if the input method module in the row matches
                 the text in the entry, False if not.
        '''
        index = row.get_index()
        if not 0 <= index < len(self._im_modules):
            return False
        return ims_modules.im_module_matches(
            self._im_modules[index], self._entry.get_text())

    def select_im_module(self, im_module: str) -> bool:
        '''
        Selects the row of an input method module in the list

        :param im_module: The identifier of the input method module
        :return: True if the input method module is listed, False if not.
        '''
        index = ims_modules.find_im_module(self._im_modules, im_module)
        if index < 0:
            LOGGER.debug('Input method module “%s” is not listed.',
                         im_module)
            self._listbox.unselect_all()
            return False
        row = self._listbox.get_row_at_index(index)
        if row is None:
            return False
        self._listbox.select_row(row)
        return True

    def on_row_selected(
            self,
            _listbox: Gtk.ListBox,
            listbox_row: Optional[Gtk.ListBoxRow]) -> None:
        '''
        Signal handler for selecting a row in the list

        :param _listbox: The list of input method modules
        :param listbox_row: The selected row, None if the selection
                            has been cleared
        '''
        if DEBUG_LEVEL > 1:
            LOGGER.debug('on_row_selected() listbox_row = %s', listbox_row)
        if listbox_row is None:
            return
        index = listbox_row.get_index()
        if not 0 <= index < len(self._im_modules):
            return
        im_module = self._im_modules[index].identifier
        if im_module == self._current_im_module.get():
            return
        ims_util.set_entry_im_module(self._entry, im_module)

    def on_entry_activate(self, entry: Gtk.Entry) -> None:
        '''
        Enter has been pressed in the entry

        The text of the entry is used as the name of the input method
        module to switch to.

        :param entry: The entry
        '''
        im_module = ims_util.set_entry_im_module(entry)
        if DEBUG_LEVEL > 1:
            LOGGER.debug('on_entry_activate() im_module = %s', im_module)
        self.select_im_module(im_module)

    def on_entry_changed(self, entry: Gtk.Entry) -> None:
        '''
        The text in the entry has changed, update the filtering of
        the list.

        :param entry: The entry
        '''
        if DEBUG_LEVEL > 1:
            LOGGER.debug('on_entry_changed() text = %s', entry.get_text())
        self._listbox.invalidate_filter()

    def on_entry_key_press_event(
            self, _entry: Gtk.Entry, event_key: Gdk.EventKey) -> bool:
        '''
        Some key has been typed into the entry, show it in the label.

        :param _entry: The entry
        :param event_key: The key event
        :return: False, the key event is handled further as usual
        '''
        description = ims_util.format_key(
            event_key.keyval,
            event_key.hardware_keycode,
            event_key.get_state())
        if DEBUG_LEVEL > 1:
            LOGGER.debug('on_entry_key_press_event() %s', description)
        self._label.set_text(description)
        return False

    def on_entry_im_module_notify(
            self, entry: Gtk.Entry, _property_spec: Any) -> None:
        '''
        The “im-module” property of the entry has changed

        :param entry: The entry
        :param _property_spec: The specification of the property
        '''
        im_module = entry.get_property('im-module')
        if self._current_im_module.set(im_module):
            LOGGER.info('Input method module changed to “%s”',
                        self._current_im_module)

def list_im_modules(
        im_modules: List[ims_modules.ImModule], im_module: str) -> str:
    '''
    Returns the text to print for the --list option

    :param im_modules: The input method modules
    :param im_module: The current input method module, marked with “*”
    '''
    lines = []
    for module in im_modules:
        marker = '*' if module.identifier == im_module else ' '
        lines.append(f'{marker} {ims_modules.format_im_module(module)}')
    return '\n'.join(lines)

def init_logging(debug: bool) -> None:
    '''
    Set up the logging

    :param debug: Whether to write debug output to stdout
    '''
    log_handler: Union[
        logging.NullHandler,
        logging.StreamHandler,
        logging.handlers.TimedRotatingFileHandler] = logging.NullHandler()
    if debug:
        log_handler = logging.StreamHandler(stream=sys.stdout)
    elif DEBUG_LEVEL > 0:
        logfile = os.path.join(
            ims_util.xdg_save_data_path('gtk-im-switcher'), 'debug.log')
        log_handler = logging.handlers.TimedRotatingFileHandler(
            logfile,
            when='midnight',
            interval=1,
            backupCount=7,
            encoding='UTF-8',
            delay=False,
            utc=False,
            atTime=None)
    log_formatter = logging.Formatter(
        '%(asctime)s %(filename)s '
        'line %(lineno)d %(funcName)s %(levelname)s: '
        '%(message)s')
    log_handler.setFormatter(log_formatter)
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.addHandler(log_handler)
    LOGGER.info('********** STARTING **********')

def main() -> None:
    '''Main program'''
    args = parse_args()
    if args.version:
        print(ims_version.get_version())
        sys.exit(0)

    init_logging(args.debug)

    # https://bugzilla.gnome.org/show_bug.cgi?id=622084
    # Bug 622084 - Ctrl+C does not exit gtk app
    signal.signal(signal.SIGINT, signal.SIG_DFL)
    try:
        locale.setlocale(locale.LC_ALL, '')
    except locale.Error:
        LOGGER.error("Using the fallback 'C' locale")
        locale.setlocale(locale.LC_ALL, 'C')
    ims_i18n.init()

    path = args.im_module_file
    if not path:
        path = ims_util.im_module_file()
    LOGGER.info('GTK IM module file: %s', path)
    im_modules = ims_modules.read_im_modules(path)

    if args.list:
        print(list_im_modules(im_modules, ims_util.current_im_module()))
        return

    initialized, _argv = Gtk.init_check(sys.argv)
    if not initialized:
        LOGGER.critical('Cannot initialize Gtk.')
        print('Cannot initialize Gtk.', file=sys.stderr)
        sys.exit(1)

    dialog = ImSwitcherDialog(im_modules=im_modules)
    response = dialog.run()
    LOGGER.info('Dialog closed with response %s', response)
    dialog.destroy()

if __name__ == '__main__':
    main()
