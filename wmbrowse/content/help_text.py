"""
Help text for the world model browser console.

Extracted from cli.py for separation of concerns.
"""

from .. import TITLE, __version__


ABOUT_TEXT = f"""{TITLE} version {__version__}
Interactive console for browsing and editing a world model.

This program comes with ABSOLUTELY NO WARRANTY.
This is free software, and you are welcome to redistribute it
under certain conditions; see the included file LICENSE for details.
"""

HELP_TEXT = """
Command - Usage
===============

SESSION
-------

  help                          Print this information
  quit | exit                   Exit the application


BROWSING
--------

  search ID_REGEX [ID_REGEX...] Search for Identifiers using regular expressions
  status ID_REGEX [ID_REGEX...] Show the current Attributes of matching Identifiers
  history ID_REGEX [ID_REGEX...]
                                Show every recorded Attribute value, oldest first;
                                snapshots are separated by "=========="


EDITING
-------

  touch ID [ID...]              Create one or more Identifiers
  update ID ATTR                Set a new value for an Attribute
                                Unknown attribute names prompt for a value type
                                (asked once per session)
  expire ID [ATTR]              Expire an Identifier or one Attribute
                                Prompts for date (YYYYMMDD) and time (HHMMSS)
  rm ID [ATTR]                  Delete an Identifier or one Attribute
  cp [-r] SRC_ID DST_ID         Copy current Attributes of SRC_ID to DST_ID
      -r                        Copy the full history instead


QUOTING
-------

  Arguments containing spaces must be wrapped in "double" or 'single' quotes:
    update "room 101" "display name"
"""
