"""
Built-in pages served from gopher://phetch/ instead of the network.
"""

from __future__ import annotations

from typing import Optional

from . import bookmarks, history

INTERNAL_PREFIX = "gopher://phetch/"

HEADER = """\
i
i      /         /         /
i ___ (___  ___ (___  ___ (___
i|   )|   )|___)|    |    |   )
i|__/ |  / |__  |__  |__  |  /
i|
i
"""

START = """\
i            ~ * ~
i
7search gopher	/v2/vs	gopher.floodgap.com
1welcome to gopherspace	/gopher	gopher.floodgap.com
1the gopher project	/	gopherproject.org
1gopher lawn	/lawn	bitreich.org
i
i            ~ * ~
i
1show help          (?)	/help	phetch
1show history       (ctrl-a)	/history	phetch
1show bookmarks     (ctrl-b)	/bookmarks	phetch
i
"""

HELP = """\
i      ** help topics **
i
1keyboard shortcuts	/help/keys	phetch
1menu navigation	/help/nav	phetch
1gopher types	/help/types	phetch
1bookmarks	/help/bookmarks	phetch
1history	/help/history	phetch
i
i            ~ * ~
i
1start screen	/home	phetch
i
"""

KEYS = """\
i   ** keyboard shortcuts **
i
ileft       back in history
iright      next in history
iup         select prev link
idown       select next link
ipg up/down scroll by many lines
i- or space same as pg up/down
i
inum key    open/select link
ienter      open current link
iescape     clear search
i
ictrl-g     go to gopher url
ictrl-u     show gopher url
ictrl-y     copy url
ictrl-b     show bookmarks
ictrl-s     save bookmark
ictrl-a     show history
ictrl-r     view raw source
ictrl-w     toggle wide mode
ictrl-q     quit phetch
i?          show help
i
iin text pages the ctrl key is
ioptional: g, u, y, b, s, a, r,
iw, h and q work on their own.
i
"""

NAV = """\
i    ** menu navigation **
i
1up & down arrows	/help/nav	phetch
i
iuse the arrows or ctrl-p/ctrl-n
ito move between links. page up
iand page down (or - and space)
imove many links at once.
i
1number keys	/help/nav	phetch
i
iwith nine links or fewer, a
inumber key opens that link.
iwith more, it selects the link
iand enter opens it.
i
1incremental search	/help/nav	phetch
i
ijust start typing. phetch jumps
ito the next link containing what
iyou typed, ignoring case, and
iwraps around to the top. escape
iclears the search.
i
"""

BOOKMARKS = """\
i       ** bookmarks **
i
ictrl-y   copy url
ictrl-s   save bookmark
ictrl-b   show bookmarks
i
iif ~/.config/phetch/ exists,
ibookmarks are saved to
i~/.config/phetch/bookmarks.gph
i
"""

HISTORY = """\
i        ** history **
i
iif you create a history.gph
ifile in ~/.config/phetch/,
ieach gopher url you open is
iappended to it.
i
ictrl-a shows it with the most
irecently visited pages first.
i
"""

TYPES = """\
i     ** gopher types **
i
iphetch supports these links:
i
0text files	/Mirrors/RFC/rfc1436.txt	fnord.one	65446
1menu items	/lawn/ascii	bitreich.org
3errors	/help/types	phetch
7search servers	/	forthworks.com	7001
8telnet links	/help/types	phetch
hexternal urls	URL:https://en.wikipedia.org/wiki/Gopher_(protocol)	phetch
i
iand these download types:
i
4binhex	/help/types	phetch
5dosfiles	/help/types	phetch
6uuencoded files	/help/types	phetch
9binaries	/help/types	phetch
gGIFs	/help/types	phetch
Iimages	/help/types	phetch
ssound files	/help/types	phetch
ddocuments	/help/types	phetch
i
iphetch does not support:
i
2CSO entries	/help/types	phetch
+mirrors	/help/types	phetch
TTelnet3270	/help/types	phetch
i
"""

_PAGES = {
    "help": HELP,
    "help/keys": KEYS,
    "help/nav": NAV,
    "help/types": TYPES,
    "help/bookmarks": BOOKMARKS,
    "help/history": HISTORY,
}


def is_internal(url: str) -> bool:
    return url.startswith(INTERNAL_PREFIX)


def lookup(name: str) -> Optional[str]:
    """Menu source for a built-in page, ex: lookup("help/keys")."""
    name = name.strip("/")
    if name in ("", "home"):
        return HEADER + START
    if name == "history":
        return history.as_raw_menu()
    if name == "bookmarks":
        return bookmarks.as_raw_menu()
    if name in _PAGES:
        return HEADER + _PAGES[name]
    return None


def lookup_url(url: str) -> Optional[str]:
    """lookup() for a gopher://phetch/1/... url."""
    name = url[len(INTERNAL_PREFIX):] if is_internal(url) else url
    if name.startswith("1/"):
        name = name[2:]
    return lookup(name)
