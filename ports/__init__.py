from .llm import LLMClientPort
from .pipeline import ClassifierPort, ProfileResolverPort, SearchFetcherPort

__all__ = [
    "LLMClientPort",
    "SearchFetcherPort",
    "ProfileResolverPort",
    "ClassifierPort",
]
