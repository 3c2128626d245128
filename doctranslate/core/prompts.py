"""
Prompt templates for the remote language model operations.

Every prompt asks for a single JSON object so responses can be parsed
without tag scraping.
"""

DETECT_LANGUAGE_PROMPT = """Determine the language of the following text and provide the ISO 639-1 language code and a confidence score (0.0-1.0) for your determination.

Respond with a JSON object: {{"languageCode": "<ISO 639-1 code>", "confidence": <number between 0.0 and 1.0>}}

Text: {text}"""


EXTRACT_TEXT_SYSTEM_PROMPT = """You are an expert at extracting plain text from various document formats."""

EXTRACT_TEXT_PROMPT = """Extract all the user-readable text from the attached document.
Do not include any formatting, metadata, or structural information. Only return the text content.

Respond with a JSON object: {"extractedText": "<the text>"}"""


TRANSLATE_TEXT_PROMPT = """Translate the following text from {source_language} to {target_language}.
Do not add any extra commentary, just provide the translated text.

Respond with a JSON object: {{"translatedText": "<the translation>"}}

Text:
{text}
"""


QUALITY_HINTS_SYSTEM_PROMPT = """You are an AI expert in translation quality assessment."""

QUALITY_HINTS_PROMPT = """Given the original text, the translated text, the source language, and the target language, generate hints or quality estimates for the translation.

Original Text: {original_text}
Translated Text: {translated_text}
Source Language: {source_language}
Target Language: {target_language}

Provide concise and informative hints about the translation quality.

Respond with a JSON object: {{"qualityHints": "<your hints>"}}"""
