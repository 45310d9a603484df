"""On-demand translations of posts, cached per entity key."""
from .cache import TranslationCache, TranslationRecord, TranslationStatus
from .translation import (
    DeepTranslatorProvider,
    GoogleTranslateProvider,
    MalformedResponseError,
    TranslationProvider,
    TranslationProviderError,
    TranslationResult,
    TranslationTransportError,
    build_provider,
)

__version__ = "0.1.0"
