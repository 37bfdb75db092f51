__version__ = '0.1'

PDF_EXT = '.pdf'
HIDDEN_PREFIX = '.'


def is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def has_suffix(name: str, suffix: str = PDF_EXT) -> bool:
    return name.lower().endswith(suffix.lower())
