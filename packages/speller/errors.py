"""
Exception types raised at the edges of the speller engine.

The engine itself never raises for rejected game actions: playing a card
without energy, picking a locked map node or acting in the wrong phase all
return ``False``/``None``. These exceptions cover input that cannot be
accepted at all (a broken vocabulary file, a fourth profile, a save slot
that does not exist).
"""


class SpellerError(Exception):
    """Base class for all speller errors."""


class VocabularyImportError(SpellerError):
    """Uploaded vocabulary could not be parsed or held no usable words."""


class ProfileLimitError(SpellerError):
    """The profile store already holds the maximum number of profiles."""


class ProfileNotFoundError(SpellerError, KeyError):
    """No profile with the requested id."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class InvalidSlotError(SpellerError, ValueError):
    """Save slot index outside the supported range."""
