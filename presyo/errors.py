"""Exceptions raised for structurally missing input."""


class PresyoError(Exception):
    """Base class for bulletin processing failures"""


class BulletinReadError(PresyoError):
    """The bulletin file is missing or cannot be read"""


class BulletinDecodeError(PresyoError):
    """The bulletin was read but its PDF/HTML content could not be decoded"""


class ExtractionTimeout(PresyoError):
    """Extraction of one bulletin took longer than the configured bound"""


class NoBulletinsFound(PresyoError):
    """Discovery found nothing to parse"""
