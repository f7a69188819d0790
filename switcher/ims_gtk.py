#!/usr/bin/python3
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
Centralized import of Gtk/Gdk.

All code in gtk-im-switcher must import Gtk/Gdk exclusively via:

    from ims_gtk import Gtk, Gdk, GTK_VERSION

gtk-im-switcher only works with Gtk 3.x: the IM module registry file
(gtk_rc_get_im_module_file()) and the “key-press-event” signal of
widgets do not exist anymore in Gtk 4.

This module must be imported **before** any other module imports
Gtk or Gdk.
'''
from typing import Tuple
import sys
import traceback
from gi import require_version

# Prevent accidental early Gtk imports
if 'gi.repository.Gtk' in sys.modules:
    raise RuntimeError(
        'Gtk was already imported before ims_gtk! '
        'Ensure all imports of Gtk/Gdk go through ims_gtk. '
        'Import stack trace:\n' + ''.join(traceback.format_stack()))

# Prevent accidental early Gdk imports
if 'gi.repository.Gdk' in sys.modules:
    raise RuntimeError(
        'Gdk was already imported before ims_gtk! '
        'Ensure all imports of Gtk/Gdk go through ims_gtk. '
        'Import stack trace:\n' + ''.join(traceback.format_stack()))

require_version('Gtk', '3.0')
require_version('Gdk', '3.0')

# pylint: disable=wrong-import-position, unused-import
from gi.repository import Gtk, Gdk # type: ignore # noqa: F401 # Intentional re-export
# pylint: enable=wrong-import-position, unused-import

# pylint: disable=no-value-for-parameter
GTK_MAJOR: int = Gtk.get_major_version()
GTK_MINOR: int = Gtk.get_minor_version()
GTK_MICRO: int = Gtk.get_micro_version()
GTK_VERSION: Tuple[int, int, int] = (GTK_MAJOR, GTK_MINOR, GTK_MICRO)
# pylint: enable=no-value-for-parameter
