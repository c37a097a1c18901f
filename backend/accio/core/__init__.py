"""Core module - the code-generation pipeline.

The orchestrator and generation client are imported from their own modules;
this package only re-exports the dependency-free pieces.
"""

from .exceptions import (
    AccioError,
    InvalidChatRequest,
    SessionNotFound,
    GenerationUnavailable,
    SessionStoreError,
    UserStoreError,
)
from .response_parser import ExtractedCode, extract_code_blocks
from .prompt_composer import PromptKind, compose_prompt, select_template

__all__ = [
    'AccioError', 'InvalidChatRequest', 'SessionNotFound', 'GenerationUnavailable',
    'SessionStoreError', 'UserStoreError', 'ExtractedCode', 'extract_code_blocks',
    'PromptKind', 'compose_prompt', 'select_template',
]
