# ==============================================================================
# TEXT NORMALIZATION
# ==============================================================================

import re
from typing import Tuple, Union

_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B-\x1F\x7F-\x9F]')
_SPACES = re.compile(r'[ \t\u00a0\u2000-\u200b\u202f\u3000]+')
_PESO = re.compile(r'(?:\u20b1|\bPhp\.?|\bPHP)\s*(?=\d)')
_DASHES = re.compile(r'[\u2010-\u2015\u2212]')


def normalize_line(line: str) -> str:
    """Single line: strip control chars and peso signs, collapse whitespace"""
    line = _CONTROL_CHARS.sub('', line)
    line = _DASHES.sub('-', line)
    line = _PESO.sub('', line)
    line = _SPACES.sub(' ', line)
    return line.strip()


def _decode_lines(raw: bytes) -> list:
    lines = []
    for chunk in re.split(rb'\r\n|\r|\n', raw):
        try:
            lines.append(chunk.decode('utf-8'))
        except UnicodeDecodeError:
            lines.append('')
    return lines


def normalize(raw_text: Union[str, bytes, None]) -> Tuple[str, ...]:
    """
    Turns raw extracted text into a stable line stream.

    Empty lines are kept so line numbers in --debug output match the
    source text. Byte input that is not valid UTF-8 degrades to empty
    lines instead of raising.
    """
    if not raw_text:
        return ()
    if isinstance(raw_text, bytes):
        raw_lines = _decode_lines(raw_text)
    else:
        raw_lines = re.split(r'\r\n|\r|\n', raw_text)
    return tuple(normalize_line(line) for line in raw_lines)
