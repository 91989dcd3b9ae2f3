import random

from ngram_chain.data_preprocessing.text_preprocessor import TextPreprocessor
from ngram_chain.errors import GenerationStalledError, InvalidArgumentError, SnapshotError
from ngram_chain.models import snapshot
from ngram_chain.utils.config_loader import DEFAULT_MAX_STEPS, load_config, logger_from_config
from ngram_chain.utils.loggers.json_logger import get_logger


class MarkovChain:
    """
    An n-gram Markov chain over literal string windows.

    Every learned sentence is padded with ``n_grams`` start and end markers
    and cut into overlapping windows of ``n_grams`` tokens. Generation starts
    from a token and keeps appending a randomly chosen window whose first
    token matches the current last token, until the end marker is reached.
    Windows that occur several times in the corpus are picked proportionally
    more often.
    """

    def __init__(
        self,
        n_grams=3,
        start="%startf%",
        end="%endf%",
        separation=" ",
        logger=None,
        rng=None,
        max_steps=DEFAULT_MAX_STEPS
    ):
        """
        Create a Markov chain.

        Args:
            n_grams (int): The size of the n-gram. Values <= 1 fall back to 3.
            start (str): The start marker. Must not contain the separation token.
            end (str): The end marker. Must not contain the separation token.
            separation (str): The separation token used to split new texts.
            logger (logging.Logger, optional): Logger for chain activity.
            rng (optional): Source of randomness with a ``choice`` method
                (default: the ``random`` module).
            max_steps (int, optional): Maximum number of windows appended by one
                ``generate`` call (default 10000). ``None`` disables the limit.

        Raises:
            InvalidArgumentError: If ``n_grams`` is not an integer.
        """
        if isinstance(n_grams, bool) or not isinstance(n_grams, int):
            raise InvalidArgumentError(f"n_grams must be an integer, got {n_grams!r}")
        self.n_grams = n_grams if n_grams > 1 else 3
        self._start = start.strip()
        self._end = end.strip()
        self.separation = separation
        self.preprocessor = TextPreprocessor(separation)
        self.corpus = []
        self.max_steps = max_steps
        self.rng = rng if rng is not None else random
        self.logger = logger if logger is not None else get_logger("ngram_chain")

        self.logger.debug("MarkovChain initialized", extra={
            "metrics": {
                "n_grams": self.n_grams,
                "start": self._start,
                "end": self._end,
                "separation": self.separation,
            }
        })

    @property
    def start(self):
        """The start marker."""
        return self._start

    @property
    def end(self):
        """The end marker."""
        return self._end

    def __len__(self):
        return len(self.corpus)

    def update(self, text):
        """
        Update the corpus of the chain with one sentence.

        Args:
            text (str): The text to add. Blank text is ignored.

        Returns:
            MarkovChain: This chain, so calls can be chained.

        Raises:
            InvalidArgumentError: If ``text`` is not a string.
        """
        if not isinstance(text, str):
            error_msg = f"Text to learn must be a string, got {type(text).__name__}"
            self.logger.error(error_msg)
            raise InvalidArgumentError(error_msg)

        if not text.strip():
            return self

        words = ([self._start] * self.n_grams
                 + self.preprocessor.tokenize(text)
                 + [self._end] * self.n_grams)

        # The final window is all end markers and can never be reached
        new_windows = [words[i:i + self.n_grams]
                       for i in range(len(words) - self.n_grams)]
        self.corpus.extend(new_windows)

        self.logger.debug("Sentence learned", extra={
            "metrics": {
                "token_count": len(words) - 2 * self.n_grams,
                "windows_added": len(new_windows),
                "corpus_size": len(self.corpus),
            }
        })
        return self

    def train(self, text_input):
        """
        Learn a single text or a list of texts.

        Args:
            text_input (str or list): Either one text string or a list of text strings.

        Returns:
            MarkovChain: This chain.
        """
        if isinstance(text_input, str):
            return self.update(text_input)
        if isinstance(text_input, list) and all(isinstance(t, str) for t in text_input):
            for text in text_input:
                self.update(text)
            return self

        error_msg = "Input must be either a single text string or a list of text strings"
        self.logger.error(error_msg)
        raise InvalidArgumentError(error_msg)

    def generate(self, start=None):
        """
        Generate a new text.

        Args:
            start (str, optional): The word to start with. Defaults to the start
                marker, which produces a sentence from the beginning.

        Returns:
            str: The generated text, or an empty string if nothing was learned.

        Raises:
            GenerationStalledError: If the walk reaches a token that begins no
                stored window, or exceeds ``max_steps``.
        """
        if not self.corpus:
            return ""

        words = [(start if start is not None else self._start).strip()]
        steps = 0

        while words[-1] != self._end:
            if self.max_steps is not None and steps >= self.max_steps:
                error_msg = f"Generation exceeded {self.max_steps} steps"
                self.logger.error(error_msg, extra={
                    "metrics": {"steps": steps, "last_token": words[-1]}
                })
                raise GenerationStalledError(error_msg, token=words[-1], steps=steps)

            next_windows = [window for window in self.corpus if window[0] == words[-1]]
            if not next_windows:
                error_msg = f"Generation stalled: no window starts with {words[-1]!r}"
                self.logger.error(error_msg, extra={
                    "metrics": {"steps": steps, "generated_tokens": len(words)}
                })
                raise GenerationStalledError(error_msg, token=words[-1], steps=steps)

            words.extend(self.rng.choice(next_windows)[1:])
            steps += 1

        text = self.preprocessor.strip_markers(" ".join(words), self._start, self._end)

        self.logger.debug("Text generated", extra={
            "metrics": {"steps": steps, "length": len(text)}
        })
        return text

    def to_dict(self):
        """
        Transform the chain into a JSON-compatible record.

        Returns:
            dict: ``nGrams``, ``start``, ``end``, ``separation`` and a deep copy of ``corpus``.
        """
        return {
            "nGrams": self.n_grams,
            "start": self.start,
            "end": self.end,
            "separation": self.separation,
            "corpus": [list(window) for window in self.corpus],
        }

    def to_json(self, indent=None):
        """Encode the chain as JSON text."""
        return snapshot.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, record, logger=None, rng=None, max_steps=DEFAULT_MAX_STEPS):
        """
        Create a MarkovChain from a record produced by :meth:`to_dict`.

        Args:
            record (dict): The record.
            logger (logging.Logger, optional): Logger for the new chain.
            rng (optional): Source of randomness for the new chain.
            max_steps (int, optional): Generation step limit for the new chain.

        Returns:
            MarkovChain: A chain that shares no lists with ``record``.

        Raises:
            SnapshotError: If the record is malformed.
        """
        if not isinstance(record, dict):
            raise SnapshotError(f"Snapshot must be a dict, got {type(record).__name__}")

        try:
            chain = cls(
                n_grams=record.get("nGrams", 3),
                start=record.get("start", "%startf%"),
                end=record.get("end", "%endf%"),
                separation=record.get("separation", " "),
                logger=logger,
                rng=rng,
                max_steps=max_steps,
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise SnapshotError(f"Invalid chain settings in snapshot: {e}") from e

        corpus = snapshot.copy_rows(record.get("corpus", []))
        for position, window in enumerate(corpus):
            if len(window) != chain.n_grams or not all(isinstance(t, str) for t in window):
                raise SnapshotError(
                    f"'corpus[{position}]' must hold {chain.n_grams} strings")
        chain.corpus = corpus
        return chain

    @classmethod
    def from_json(cls, text, logger=None, rng=None, max_steps=DEFAULT_MAX_STEPS):
        """Create a MarkovChain from JSON text produced by :meth:`to_json`."""
        return cls.from_dict(snapshot.loads(text), logger=logger, rng=rng, max_steps=max_steps)

    @classmethod
    def from_config(cls, environment="development", config_dir=None, logger=None, rng=None):
        """
        Create an empty MarkovChain from the YAML configuration.

        Args:
            environment (str): Environment whose config file to prefer.
            config_dir (str, optional): Directory to read configs from.
            logger (logging.Logger, optional): Logger; built from the config when omitted.
            rng (optional): Source of randomness.

        Returns:
            MarkovChain: The configured chain.
        """
        config = load_config(environment=environment, config_dir=config_dir, logger=logger)
        if logger is None:
            logger = logger_from_config(config)

        settings = config["string_corpus"]
        return cls(
            n_grams=settings["n_grams"],
            start=settings["start"],
            end=settings["end"],
            separation=settings["separation"],
            logger=logger,
            rng=rng,
            max_steps=config["generation"]["max_steps"],
        )
