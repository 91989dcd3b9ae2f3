"""
Text Preprocessor Module

Separator based tokenization shared by both chains. Only naive splitting is
done here: no punctuation handling, stemming or language detection.

### Features:
- Collapsing repeated whitespace
- Splitting on a separation string without producing empty tokens
- Removing sentinel markers from generated text
"""

import re


class TextPreprocessor:
    def __init__(self, separation=" "):
        """
        Initializes the TextPreprocessor with the separation string used to split sentences.

        Args:
            separation (str or None): The separation token. ``None`` or any
                whitespace-only string splits on runs of whitespace.
        """
        if separation is not None and not isinstance(separation, str):
            raise TypeError("separation must be a string or None")
        if separation == "":
            raise ValueError("separation must not be empty")
        self.separation = separation

    @property
    def splits_on_whitespace(self):
        """True when the separation is a whitespace run."""
        return self.separation is None or self.separation.isspace()

    def handle_whitespace(self, text):
        """Removes extra whitespace from text."""
        return " ".join(text.split())

    def tokenize(self, text):
        """
        Splits text into tokens on the separation string.

        Repeated separators never produce empty tokens, and leading or
        trailing separators are ignored.

        Args:
            text (str): The text to split.

        Returns:
            list of str: The tokens, in order.
        """
        if self.splits_on_whitespace:
            return text.split()
        return [token for token in text.strip().split(self.separation) if token]

    def strip_markers(self, text, start, end):
        """
        Removes start and end markers from a space joined sentence.

        Every ``"<start> "`` and ``" <end>"`` occurrence is dropped, then the
        whitespace is collapsed.

        Args:
            text (str): The generated sentence, tokens joined by single spaces.
            start (str): The start marker.
            end (str): The end marker.

        Returns:
            str: The sentence without markers.
        """
        text = re.sub(re.escape(f"{start} "), "", text)
        text = re.sub(re.escape(f" {end}"), "", text)
        return self.handle_whitespace(text)
