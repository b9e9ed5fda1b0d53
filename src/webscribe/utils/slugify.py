"""
Slugs for heading anchors and output filenames.
"""

import re
from typing import Optional

# Anything that is not a word character, whitespace or hyphen
ANCHOR_UNSAFE_PATTERN = re.compile(r"[^\w\s-]")

# Characters rejected by common filesystems, plus control characters
FILENAME_UNSAFE_PATTERN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

WHITESPACE_PATTERN = re.compile(r"\s+")
MULTIPLE_HYPHENS_PATTERN = re.compile(r"-+")

DEFAULT_FILENAME = "webscribe-notes"
MAX_FILENAME_LENGTH = 80

# Windows reserved filenames
WINDOWS_RESERVED_NAMES = {
    "CON",
    "PRN",
    "AUX",
    "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}


def slugify(text: str, max_length: Optional[int] = None) -> str:
    """
    Convert heading text to an anchor slug.

    Lower-cases, drops punctuation, and joins words with single hyphens, so
    the same heading always yields the same anchor in the table of contents
    and on the heading itself.

    Args:
        text: Heading text
        max_length: Optional maximum length of the result

    Returns:
        Slug, possibly empty

    Examples:
        >>> slugify("Hello World!")
        'hello-world'

        >>> slugify("Step 2: Install  the CLI")
        'step-2-install-the-cli'
    """
    if not text or not text.strip():
        return ""

    result = ANCHOR_UNSAFE_PATTERN.sub("", text.lower())
    result = WHITESPACE_PATTERN.sub("-", result.strip())
    result = MULTIPLE_HYPHENS_PATTERN.sub("-", result)

    if max_length and len(result) > max_length:
        result = result[:max_length].rstrip("-")

    return result


def safe_filename(title: Optional[str], max_length: int = MAX_FILENAME_LENGTH) -> str:
    """
    Build an output filename stem from a page title.

    Args:
        title: Page title; empty or missing titles use the default name
        max_length: Maximum length of the stem

    Returns:
        Lower-case stem without filesystem-reserved characters

    Examples:
        >>> safe_filename('Intro: "Why" / How')
        'intro-why-how'

        >>> safe_filename("")
        'webscribe-notes'
    """
    result = FILENAME_UNSAFE_PATTERN.sub("", (title or DEFAULT_FILENAME).strip())
    result = WHITESPACE_PATTERN.sub("-", result).lower()
    result = MULTIPLE_HYPHENS_PATTERN.sub("-", result)[:max_length].strip("-.")

    if not result:
        return DEFAULT_FILENAME

    # Windows refuses reserved device names even with an extension
    if result.split("-")[0].upper() in WINDOWS_RESERVED_NAMES:
        result = f"{result}-reserved"

    return result
