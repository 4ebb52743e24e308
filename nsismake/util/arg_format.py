"""Command line argument formatting for makensis `/X` switches.

The strings produced here are parsed twice: once by the OS argument splitter
and once by makensis itself when it interprets the `/X` payload as a script
line. The escaping therefore follows makensis rules (`$\\"` is an escaped
quote inside an NSIS string) and differs between Windows and the rest.
"""

import re
from os import PathLike

from nsismake.util.platform_detect import PlatformKind


QUOTES_NEEDED = re.compile(r"\s|\"|'|`")


def is_blank(value: str | None) -> bool:
    """True if `value` is None, empty or only whitespace."""
    return value is None or not value.strip()


def format_string_argument(
    source: "str | PathLike[str] | None",
    always_quote: bool,
    platform: PlatformKind,
) -> str:
    """Format a value so it can be used as a makensis `/X` parameter value.

    Args:
        source: The raw string or path. None is treated like an empty string.
        always_quote: Quote even when the content doesn't require it.
        platform: The platform whose command line rules apply.

    Returns:
        The formatted token. Empty input yields a quoted empty string.
    """
    quote = '\\"' if platform.is_windows else '"'
    text = "" if source is None else str(source)
    if not text:
        return quote + quote

    if not always_quote and not QUOTES_NEEDED.search(text):
        return text

    if platform.is_windows:
        text = text.replace("\\", "\\\\").replace('"', '$\\\\\\"')
    else:
        text = text.replace('"', '$\\"')
    return quote + text + quote
