"""Language detection strategies.

Only a fixed detector is registered today.  Everything downstream reads
``SessionContext.language`` and never assumes the detector is trivial, so
a real detector can be registered under a new name in ``_known_detectors``.
"""

from abc import ABC, abstractmethod

from .models import PRIMARY_LANGUAGE, Language


class LanguageDetector(ABC):
    """Resolve the reply language for a user message."""

    detector_name: str = ""

    @abstractmethod
    def detect(self, message: str) -> Language: ...


class FixedLanguageDetector(LanguageDetector):
    """Always reports the same language."""

    detector_name = "fixed"

    def __init__(self, language: Language = PRIMARY_LANGUAGE) -> None:
        self._language = language

    def detect(self, message: str) -> Language:
        return self._language


_known_detectors: dict[str, type[LanguageDetector]] = {
    FixedLanguageDetector.detector_name: FixedLanguageDetector,
}


def get_language_detector(name: str) -> LanguageDetector:
    if name not in _known_detectors:
        raise NotImplementedError(f"Language detector {name} is not implemented.")
    return _known_detectors[name]()
