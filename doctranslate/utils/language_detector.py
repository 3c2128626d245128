"""
Offline language detection

Uses langdetect library (based on Google's language-detection library)
for fast language identification when no remote model should be called.
"""
from typing import Optional, Tuple
from langdetect import DetectorFactory, detect_langs, LangDetectException

# langdetect is non-deterministic unless seeded
DetectorFactory.seed = 0

# langdetect emits region-qualified codes for a few languages
LANGDETECT_CODE_MAP = {
    'zh-cn': 'zh',
    'zh-tw': 'zh',
}


class LanguageDetector:
    """Detects language from extracted text"""

    # Minimum text length for reliable detection (characters)
    MIN_TEXT_LENGTH = 20

    # Maximum text to analyze (to avoid performance issues with large files)
    MAX_SAMPLE_LENGTH = 10000

    @staticmethod
    def detect_language(text: str) -> Tuple[Optional[str], float]:
        """
        Detect the language of a text sample

        Args:
            text: Text content

        Returns:
            Tuple of (ISO 639-1 code or None, confidence 0.0-1.0)
        """
        sample = ' '.join((text or '').split())[:LanguageDetector.MAX_SAMPLE_LENGTH]
        if len(sample) < LanguageDetector.MIN_TEXT_LENGTH:
            return None, 0.0

        try:
            candidates = detect_langs(sample)
        except LangDetectException:
            return None, 0.0

        if not candidates:
            return None, 0.0

        best = candidates[0]
        code = LANGDETECT_CODE_MAP.get(best.lang, best.lang)
        return code, round(float(best.prob), 4)
