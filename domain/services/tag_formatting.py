"""Default tag normalizer, displayer and tag list parser.

These are pure functions. The TaggingService receives the normalizer and
displayer as strategies through TaggingOptions, so any callable with the
same signature can replace them.
"""

import re
import unicodedata
from typing import Iterable, List, Optional, Union

DEFAULT_DELIMITER = ","

_NON_ALNUM = re.compile(r"[\W_]+", re.UNICODE)
# Letters and digits, keeping inner apostrophes ("don't") in the word
_WORD = re.compile(r"[^\W_]+(?:'[^\W_]+)*", re.UNICODE)

TagNames = Union[str, Iterable[str], None]


def slugify(value: str, separator: str = "-") -> str:
    """Normalize a raw tag string into its slug.

    Accents are stripped, text is case-folded, and every run of characters
    that are not letters or digits becomes a single separator.

    Args:
        value (str): Raw tag string.
        separator (str): Character joining the words of the slug.

    Returns:
        str: The slug, empty if the input holds no letter or digit.

    Example:
        >>> slugify("  Foo-Bar  ")
        'foo-bar'
        >>> slugify("Crème  Brûlée!")
        'creme-brulee'
    """
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    slug = _NON_ALNUM.sub(separator, stripped.casefold())
    return slug.strip(separator)


def titleize(value: str) -> str:
    """Build the display form of a raw tag string.

    Whitespace runs collapse to one space. Every word starts with a capital
    and the rest is lower-cased; hyphens and other punctuation separate words.

    Example:
        >>> titleize("  machine   learning ")
        'Machine Learning'
        >>> titleize("foo-bar")
        'Foo-Bar'
    """
    collapsed = " ".join(value.split())
    return _WORD.sub(lambda match: match.group(0).capitalize(), collapsed)


def make_tag_list(tag_names: TagNames, delimiter: Optional[str] = None) -> List[str]:
    """Turn caller input into a clean list of tag names.

    A string is split on the delimiter. A sequence holding a single string is
    split as well, so ``["a, b"]`` and ``"a, b"`` are equivalent. Each part is
    trimmed and empty parts are discarded.

    Args:
        tag_names: Delimited string, iterable of strings, or None.
        delimiter (Optional[str]): Delimiter, defaults to a comma.

    Returns:
        List[str]: Trimmed, non-empty tag names in input order.
    """
    delimiter = delimiter or DEFAULT_DELIMITER
    if tag_names is None:
        return []
    if isinstance(tag_names, str):
        parts = tag_names.split(delimiter)
    else:
        parts = [str(name) for name in tag_names if name is not None]
        if len(parts) == 1:
            parts = parts[0].split(delimiter)

    return [part.strip() for part in parts if part.strip()]
