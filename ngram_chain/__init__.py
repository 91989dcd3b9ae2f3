"""
ngram_chain: sentence generation from learned n-gram windows.

Two interchangeable engines are provided:

- :class:`MarkovChain` stores overlapping windows of literal words.
- :class:`IndexedMarkovChain` stores whole sentences as indices into a word dictionary
  and can generate forward or backward from any learned word.
"""

from ngram_chain.errors import (
    ChainError,
    GenerationStalledError,
    InvalidArgumentError,
    SnapshotError,
)
from ngram_chain.models.indexed_chain import IndexedMarkovChain
from ngram_chain.models.string_corpus_chain import MarkovChain

__version__ = "1.0.0"

__all__ = [
    "ChainError",
    "GenerationStalledError",
    "IndexedMarkovChain",
    "InvalidArgumentError",
    "MarkovChain",
    "SnapshotError",
]
