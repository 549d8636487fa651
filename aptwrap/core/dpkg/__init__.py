from aptwrap.core.dpkg.dpkg import show, show_command
from aptwrap.core.dpkg.stanza import parse_stanza

__all__ = ["parse_stanza", "show", "show_command"]
