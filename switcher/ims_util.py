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
Utility functions used in gtk-im-switcher which need Gtk
'''

from typing import Optional
from typing import TYPE_CHECKING
import os
import logging

# pylint: disable=wrong-import-position
from ims_gtk import Gtk, Gdk # type: ignore
if TYPE_CHECKING:
    # These imports are only for type checkers (mypy). They must not be
    # executed at runtime because ims_gtk controls the Gtk/Gdk versions.
    # pylint: disable=reimported
    from gi.repository import Gtk, Gdk  # type: ignore
    # pylint: enable=reimported
# pylint: enable=wrong-import-position

LOGGER = logging.getLogger('gtk-im-switcher')

# Order in which the modifiers appear in a key description
MODIFIER_PREFIXES = (
    (Gdk.ModifierType.SUPER_MASK, 'Super+'),
    (Gdk.ModifierType.HYPER_MASK, 'Hyper+'),
    (Gdk.ModifierType.META_MASK, 'Meta+'),
    (Gdk.ModifierType.CONTROL_MASK, 'Ctrl+'),
    (Gdk.ModifierType.MOD1_MASK, 'Alt+'),
    (Gdk.ModifierType.SHIFT_MASK, 'Shift+'),
)

def format_key(keyval: int, hardware_keycode: int, state: int) -> str:
    '''Returns a human readable description of a key event

    :param keyval: The key value of the key event
    :param hardware_keycode: The hardware key code of the key event
    :param state: The modifier state of the key event
    :return: A description like “Ctrl+Alt+a (38)”
    '''
    shortcut = ''
    for mask, prefix in MODIFIER_PREFIXES:
        if int(state) & int(mask):
            shortcut += prefix
    name = Gdk.keyval_name(keyval)
    if not name:
        name = 'Unknown'
    shortcut += name
    return f'{shortcut} ({hardware_keycode})'

def current_im_module(entry: Optional[Gtk.Entry] = None) -> str:
    '''Returns the name of the input method module currently used

    Checked in this order: the environment variable GTK_IM_MODULE,
    the “gtk-im-module” setting of Gtk and the “im-module” property
    of the entry.

    :param entry: An entry to fall back to if neither the environment
                  nor the Gtk settings specify an input method module
    :return: The name of the input method module, '' if unknown.
    '''
    im_module = os.getenv('GTK_IM_MODULE')
    if im_module:
        LOGGER.debug('GTK_IM_MODULE=%s', im_module)
        return im_module.strip()
    settings = Gtk.Settings.get_default()
    if settings is not None:
        im_module = settings.get_property('gtk-im-module')
        if im_module:
            LOGGER.debug('gtk-im-module setting: %s', im_module)
            return str(im_module).strip()
    if entry is not None:
        im_module = entry.get_property('im-module')
        if im_module:
            LOGGER.debug('im-module property of entry: %s', im_module)
            return str(im_module).strip()
    return ''

def im_module_file() -> str:
    '''Returns the full path of the GTK IM module file

    The environment variable GTK_IM_SWITCHER_IM_MODULE_FILE
    overrides what Gtk reports.
    '''
    path = os.getenv('GTK_IM_SWITCHER_IM_MODULE_FILE')
    if path:
        return path
    path = Gtk.rc_get_im_module_file()
    if not path:
        return ''
    return str(path)

def set_entry_im_module(
        entry: Gtk.Entry, im_module: Optional[str] = None) -> str:
    '''Switches the input method module of an entry

    :param entry: The entry
    :param im_module: The name of the input method module to use.
                      If None, the text in the entry is used as the
                      name and the entry is cleared.
    :return: The name of the input method module now used, without
             leading and trailing white space.
    '''
    entry.reset_im_context()
    if im_module is None:
        im_module = entry.get_text()
        entry.set_text('')
    im_module = im_module.strip()
    LOGGER.debug('Setting im-module of entry to “%s”', im_module)
    entry.set_property('im-module', im_module)
    return im_module

def xdg_save_data_path(*resource: str) -> str:
    '''
    Returns the directory for data files of gtk-im-switcher
    in $XDG_DATA_HOME, creating it if it does not exist yet.
    '''
    # xdg.BaseDirectory.save_data_path(*resource) can fail because it
    # calls os.makedirs() without the exist_ok=True option, and then
    # os.makedirs() can fail in a race condition
    # (see: https://bugs.python.org/issue1675)
    xdg_data_home = os.environ.get('XDG_DATA_HOME') or os.path.join(
        os.path.expanduser('~'), '.local', 'share')
    resource_joined = os.path.join(*resource)
    assert not resource_joined.startswith('/')
    path = os.path.join(xdg_data_home, resource_joined)
    if not os.path.isdir(path):
        os.makedirs(path, exist_ok=True)
    return path
