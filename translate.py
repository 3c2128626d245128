"""
Command-line interface for document translation
"""
import os
import sys
import argparse
import asyncio

import aiofiles

from doctranslate.config import (
    API_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    GEMINI_API_KEY,
    LLM_PROVIDER,
    OPENAI_API_KEY,
    TranslationConfig,
)
from doctranslate.core.documents import DocumentFile, get_unique_output_path, translated_filename
from doctranslate.core.exceptions import TranslationError, error_message
from doctranslate.core.languages import LANGUAGES, is_supported
from doctranslate.core.llm import SUPPORTED_PROVIDERS
from doctranslate.core.workflow import create_session
from doctranslate.utils.unified_logger import setup_cli_logger, LogType


def build_parser() -> argparse.ArgumentParser:
    codes = ", ".join(language.value for language in LANGUAGES)
    parser = argparse.ArgumentParser(description="Translate a document with an LLM and Cloud Translation.")
    parser.add_argument("-i", "--input", required=True, help="Path to the input document.")
    parser.add_argument("-o", "--output", default=None, help="Path to the translated document. Defaults to <name>_translated_to_<lang>.<ext> next to the input.")
    parser.add_argument("-sl", "--source_lang", default=DEFAULT_SOURCE_LANGUAGE, help="Source language code. Omit to detect it automatically.")
    parser.add_argument("-tl", "--target_lang", default=DEFAULT_TARGET_LANGUAGE, help=f"Target language code ({codes}).")
    parser.add_argument("-m", "--model", default=DEFAULT_MODEL, help=f"LLM model (default: {DEFAULT_MODEL}).")
    parser.add_argument("--api_endpoint", default=API_ENDPOINT, help=f"API endpoint for the OpenAI compatible provider (default: {API_ENDPOINT}).")
    parser.add_argument("--provider", default=LLM_PROVIDER, choices=list(SUPPORTED_PROVIDERS), help=f"LLM provider to use (default: {LLM_PROVIDER}).")
    parser.add_argument("--gemini_api_key", default=GEMINI_API_KEY, help="Google Gemini API key (required if using gemini provider).")
    parser.add_argument("--openai_api_key", default=OPENAI_API_KEY, help="OpenAI API key.")
    parser.add_argument("--text-output", dest="text_output", default=None, help="Also write the translated plain text to this path.")
    parser.add_argument("--hints", action="store_true", help="Print AI quality hints for the translation.")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    return parser


async def run_translation(args, logger) -> str:
    """
    Translate ``args.input`` and write the result to ``args.output``

    Returns:
        Path of the translated document
    """
    config = TranslationConfig.from_cli_args(args)
    session = create_session(config, logger.create_retry_callback())
    try:
        document = await DocumentFile.from_path(args.input)
        session.set_target_language(config.target_language)
        await session.load_document(document)

        if config.source_language:
            session.set_source_language(config.source_language)
        elif not session.source_language:
            raise TranslationError(
                f"Could not detect the source language ({session.detection_error}). Pass it with -sl."
            )
        else:
            logger.info(
                f"Detected source language: {session.detected_language_label} "
                f"(confidence {session.detection_confidence:.2f})",
                LogType.LANGUAGE_DETECTED
            )

        await session.translate()

        async with aiofiles.open(args.output, 'wb') as f:
            await f.write(session.translated_document_bytes())

        if args.text_output:
            async with aiofiles.open(args.text_output, 'w', encoding='utf-8') as f:
                await f.write(session.translated_text)

        if args.hints:
            hints = await session.fetch_quality_hints()
            logger.info("Quality hints", LogType.QUALITY_HINTS, {'hints': hints})

        return args.output
    finally:
        await session.aclose()


if __name__ == "__main__":
    parser = build_parser()
    args = parser.parse_args()

    if not args.target_lang:
        parser.error("-tl/--target_lang is required")
    if not is_supported(args.target_lang):
        parser.error(f"Unsupported target language: {args.target_lang}")
    if args.source_lang and not is_supported(args.source_lang):
        parser.error(f"Unsupported source language: {args.source_lang}")
    if args.provider == "gemini" and not args.gemini_api_key:
        parser.error("--gemini_api_key is required when using gemini provider")

    if args.output is None:
        args.output = os.path.join(
            os.path.dirname(args.input),
            translated_filename(os.path.basename(args.input), args.target_lang)
        )

    # Ensure output path is unique (add number suffix if file exists)
    args.output = get_unique_output_path(args.output)

    logger = setup_cli_logger(enable_colors=not args.no_color)

    logger.info("Translation Started", LogType.TRANSLATION_START, {
        'source_lang': args.source_lang,
        'target_lang': args.target_lang,
        'model': args.model,
        'input_file': args.input,
        'llm_provider': args.provider
    })

    try:
        output_file = asyncio.run(run_translation(args, logger))
        logger.info("Translation Completed Successfully", LogType.TRANSLATION_END, {
            'output_file': output_file,
            'text_output_file': args.text_output
        })
    except TranslationError as e:
        logger.error(f"Translation failed: {error_message(e)}", LogType.ERROR_DETAIL, {
            'details': str(e),
            'attempts_made': getattr(e, 'attempts_made', 1)
        })
        sys.exit(1)
