"""
Plain text extraction from uploaded documents.

- extract_text_from_document: ask the model to read a document data URI
- ExtractTextFromDocumentInput / ExtractTextFromDocumentOutput: request and result types
"""
from dataclasses import dataclass
from typing import Optional

from ..documents import parse_data_uri
from ..llm import DocumentPart, LLMProvider
from ..llm.extraction import require_field
from ..prompts import EXTRACT_TEXT_PROMPT, EXTRACT_TEXT_SYSTEM_PROMPT
from ..retry import RetryExecutor, RetryPolicy
from .common import provider_scope, require_fields


@dataclass
class ExtractTextFromDocumentInput:
    # Expected format: 'data:<mimetype>;base64,<encoded_data>'
    document_data_uri: str


@dataclass
class ExtractTextFromDocumentOutput:
    extracted_text: str


async def extract_text_from_document(
    request: ExtractTextFromDocumentInput,
    provider: Optional[LLMProvider] = None,
    policy: Optional[RetryPolicy] = None,
    log_callback=None
) -> ExtractTextFromDocumentOutput:
    """Extract all user-readable text from a document"""
    require_fields(request, 'document_data_uri')
    mime_type, _ = parse_data_uri(request.document_data_uri)
    document = DocumentPart(mime_type=mime_type, data=request.document_data_uri.split(',', 1)[1])

    async with provider_scope(provider) as llm:
        async def extract():
            payload = await llm.generate_json(
                EXTRACT_TEXT_PROMPT,
                system_prompt=EXTRACT_TEXT_SYSTEM_PROMPT,
                documents=[document]
            )
            return ExtractTextFromDocumentOutput(
                require_field(payload, 'extractedText', str, llm.service_name)
            )

        return await RetryExecutor(policy, log_callback=log_callback).execute(
            extract, operation_id="extract_text_from_document"
        )
