import copy
import random

from ngram_chain.data_preprocessing.text_preprocessor import TextPreprocessor
from ngram_chain.errors import GenerationStalledError, InvalidArgumentError, SnapshotError
from ngram_chain.models import snapshot
from ngram_chain.utils.config_loader import DEFAULT_MAX_STEPS, load_config, logger_from_config
from ngram_chain.utils.loggers.json_logger import get_logger

DEFAULT_GENERATION_CONFIG = {"from": "", "grams": 2, "backward": False}


def _check_generation_config(config, error_cls):
    """Validate the types of a fully resolved generation config."""
    if not isinstance(config["from"], str):
        raise error_cls("'from' must be a string")
    grams = config["grams"]
    if isinstance(grams, bool) or not isinstance(grams, int) or grams < 1:
        raise error_cls(f"'grams' must be an integer >= 1, got {grams!r}")
    if not isinstance(config["backward"], bool):
        raise error_cls("'backward' must be a boolean")


class IndexedMarkovChain:
    """
    A Markov chain that stores whole sentences as indices into a word dictionary.

    Each distinct word is interned once in ``dictionary``; ``corpus`` holds
    every learned sentence as a list of dictionary positions. Generation jumps
    between sentences sharing a word, copying up to ``grams`` words after
    (or before, when walking backward) each occurrence until a sentence edge
    is reached.

    A jump always lands on the first occurrence of a word, so a sentence like
    "i think i can do it" can lead the walk back to the same word forever.
    Generation therefore stops with ``GenerationStalledError`` when a word
    comes back and every jump since the last random choice had only one
    sentence to pick from (the walk would repeat exactly), and in any case
    after ``max_steps`` jumps.

    Attributes:
        corpus (list of list of int): Learned sentences as dictionary indices.
        dictionary (list of str): Distinct words in first-seen order.
        config (dict): Default ``from``, ``grams`` and ``backward`` for ``generate``.
    """

    def __init__(self, base=None, separation=None, logger=None, rng=None,
                 max_steps=DEFAULT_MAX_STEPS):
        """
        Create a chain, optionally restored from a snapshot.

        Args:
            base (dict or str, optional): A record from :meth:`to_dict` or its JSON
                text. Anything else starts an empty chain.
            separation (str, optional): Token separator; ``None`` splits on whitespace.
            logger (logging.Logger, optional): Logger for chain activity.
            rng (optional): Source of randomness with a ``choice`` method.
            max_steps (int, optional): Maximum sentence jumps per ``generate`` call
                (default 10000). ``None`` disables the limit.

        Raises:
            SnapshotError: If ``base`` is text that is not a JSON object, or
                describes an inconsistent chain.
        """
        self.logger = logger if logger is not None else get_logger("ngram_chain")
        self.preprocessor = TextPreprocessor(separation)
        self.rng = rng if rng is not None else random
        self.max_steps = max_steps

        if isinstance(base, (str, bytes)):
            base = snapshot.loads(base)
        if not isinstance(base, dict):
            base = {}

        self.corpus, self.dictionary, self.config = self._restore(base)
        self._positions = {word: index for index, word in enumerate(self.dictionary)}

        self.logger.debug("IndexedMarkovChain initialized", extra={
            "metrics": {
                "sentences": len(self.corpus),
                "dictionary_size": len(self.dictionary),
                "config": self.config,
            }
        })

    @staticmethod
    def _restore(record):
        """Deep copy and validate the fields of a snapshot record."""
        corpus = snapshot.copy_rows(record.get("corpus", []))

        dictionary = record.get("dictionary", [])
        if not isinstance(dictionary, (list, tuple)):
            raise SnapshotError("'dictionary' must be a list")
        dictionary = list(dictionary)
        if not all(isinstance(word, str) for word in dictionary):
            raise SnapshotError("'dictionary' must only hold strings")
        if len(set(dictionary)) != len(dictionary):
            raise SnapshotError("'dictionary' holds duplicate words")

        for position, sentence in enumerate(corpus):
            for index in sentence:
                if (isinstance(index, bool) or not isinstance(index, int)
                        or not 0 <= index < len(dictionary)):
                    raise SnapshotError(
                        f"'corpus[{position}]' holds invalid dictionary index {index!r}")

        stored = record.get("config", {})
        if not isinstance(stored, dict):
            raise SnapshotError("'config' must be an object")
        config = copy.deepcopy(DEFAULT_GENERATION_CONFIG)
        for key in config:
            if stored.get(key) is not None:
                config[key] = stored[key]
        _check_generation_config(config, SnapshotError)

        return corpus, dictionary, config

    def __len__(self):
        return len(self.corpus)

    def __contains__(self, word):
        return self.contains(word)

    def update(self, sentence):
        """
        Learn one sentence.

        Args:
            sentence (str): The sentence to add.

        Returns:
            IndexedMarkovChain: This chain, so calls can be chained.

        Raises:
            InvalidArgumentError: If ``sentence`` is not a string.
        """
        if not isinstance(sentence, str):
            error_msg = f"Sentence to learn must be a string, got {type(sentence).__name__}"
            self.logger.error(error_msg)
            raise InvalidArgumentError(error_msg)

        indices = []
        new_words = 0
        for word in self.preprocessor.tokenize(sentence):
            index = self._positions.get(word)
            if index is None:
                index = len(self.dictionary)
                self.dictionary.append(word)
                self._positions[word] = index
                new_words += 1
            indices.append(index)
        self.corpus.append(indices)

        self.logger.debug("Sentence learned", extra={
            "metrics": {
                "token_count": len(indices),
                "new_words": new_words,
                "sentences": len(self.corpus),
                "dictionary_size": len(self.dictionary),
            }
        })
        return self

    def train(self, text_input):
        """
        Learn a single sentence or a list of sentences.

        Args:
            text_input (str or list): Either one sentence or a list of sentences.

        Returns:
            IndexedMarkovChain: This chain.
        """
        if isinstance(text_input, str):
            return self.update(text_input)
        if isinstance(text_input, list) and all(isinstance(t, str) for t in text_input):
            for sentence in text_input:
                self.update(sentence)
            return self

        error_msg = "Input must be either a single text string or a list of text strings"
        self.logger.error(error_msg)
        raise InvalidArgumentError(error_msg)

    def contains(self, word):
        """Check whether a word was learned."""
        return word in self._positions

    def resolve_config(self, config=None, from_word=None, grams=None, backward=None):
        """
        Merge generation overrides with the stored defaults, field by field.

        A field is overridden when it is given and not ``None``; an empty
        ``from`` or ``backward=False`` therefore override a stored default.
        Keyword arguments take precedence over the ``config`` mapping.

        Args:
            config (dict, optional): Overrides keyed ``from``, ``grams``, ``backward``.
            from_word (str, optional): Word to start from; ``""`` picks a random sentence.
            grams (int, optional): Number of words copied per jump.
            backward (bool, optional): Walk toward the sentence start.

        Returns:
            dict: The effective configuration.

        Raises:
            InvalidArgumentError: If a resolved field has the wrong type or
                ``grams`` is below 1.
        """
        if config is not None and not isinstance(config, dict):
            raise InvalidArgumentError("Generation config must be a dict")

        resolved = dict(self.config)
        for key, value in (config or {}).items():
            if key in resolved and value is not None:
                resolved[key] = value

        keyword_overrides = {"from": from_word, "grams": grams, "backward": backward}
        for key, value in keyword_overrides.items():
            if value is not None:
                resolved[key] = value

        _check_generation_config(resolved, InvalidArgumentError)
        return resolved

    def generate(self, config=None, from_word=None, grams=None, backward=None):
        """
        Generate a sentence.

        Args:
            config (dict, optional): Overrides keyed ``from``, ``grams``, ``backward``.
            from_word (str, optional): Word to start from.
            grams (int, optional): Number of words copied per jump.
            backward (bool, optional): Generate the part of a sentence leading
                up to ``from_word`` instead of the part following it.

        Returns:
            str: The generated sentence, or an empty string when nothing was
            learned or the start word is unknown.

        Raises:
            GenerationStalledError: If the walk reaches an index contained in no
                sentence, or exceeds ``max_steps``.
        """
        settings = self.resolve_config(config, from_word=from_word, grams=grams, backward=backward)
        start_word, width, walk_backward = settings["from"], settings["grams"], settings["backward"]

        if not self.corpus:
            return ""

        if start_word:
            if start_word not in self._positions:
                self.logger.debug("Unknown start word", extra={
                    "metrics": {"from": start_word}
                })
                return ""
            words = [self._positions[start_word]]
        else:
            candidates = [sentence for sentence in self.corpus if sentence]
            if not candidates:
                return ""
            sentence = self.rng.choice(candidates)
            words = [sentence[-1] if walk_backward else sentence[0]]

        steps = 0
        done = False
        # Words reached since the last jump that had more than one sentence to pick from
        forced_path = set()
        while not done:
            if self.max_steps is not None and steps >= self.max_steps:
                error_msg = f"Generation exceeded {self.max_steps} steps"
                self.logger.error(error_msg, extra={
                    "metrics": {"steps": steps, "last_word": self.dictionary[words[-1]]}
                })
                raise GenerationStalledError(error_msg, token=words[-1], steps=steps)

            last = words[-1]
            sentences = [sentence for sentence in self.corpus if last in sentence]
            if not sentences:
                error_msg = f"Generation stalled: no sentence contains index {last}"
                self.logger.error(error_msg, extra={
                    "metrics": {"steps": steps, "generated_words": len(words)}
                })
                raise GenerationStalledError(error_msg, token=last, steps=steps)

            if len(sentences) > 1:
                forced_path.clear()
            elif last in forced_path:
                error_msg = f"Generation stalled: walk keeps returning to {self.dictionary[last]!r}"
                self.logger.error(error_msg, extra={
                    "metrics": {"steps": steps, "generated_words": len(words)}
                })
                raise GenerationStalledError(error_msg, token=last, steps=steps)
            else:
                forced_path.add(last)

            sentence = self.rng.choice(sentences)
            position = sentence.index(last)

            if walk_backward:
                words.extend(reversed(sentence[max(0, position - width):position]))
                done = position - width <= 0
            else:
                words.extend(sentence[position + 1:position + 1 + width])
                done = position + width >= len(sentence) - 1
            steps += 1

        if walk_backward:
            words.reverse()
        text = " ".join(self.dictionary[index] for index in words)

        self.logger.debug("Sentence generated", extra={
            "metrics": {"steps": steps, "words": len(words), "backward": walk_backward}
        })
        return text

    def to_dict(self):
        """
        Transform the chain into a JSON-compatible record.

        Returns:
            dict: Deep copies of ``corpus``, ``dictionary`` and ``config``.
        """
        return {
            "corpus": [list(sentence) for sentence in self.corpus],
            "dictionary": list(self.dictionary),
            "config": dict(self.config),
        }

    def to_json(self, indent=None):
        """Encode the chain as JSON text."""
        return snapshot.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, record, **kwargs):
        """Create a chain from a record; ``kwargs`` are passed to the constructor."""
        if not isinstance(record, dict):
            raise SnapshotError(f"Snapshot must be a dict, got {type(record).__name__}")
        return cls(base=record, **kwargs)

    @classmethod
    def from_json(cls, text, **kwargs):
        """Create a chain from JSON text; ``kwargs`` are passed to the constructor."""
        return cls(base=snapshot.loads(text), **kwargs)

    @classmethod
    def from_config(cls, environment="development", config_dir=None, logger=None, rng=None):
        """
        Create an empty chain whose generation defaults come from the YAML configuration.

        Args:
            environment (str): Environment whose config file to prefer.
            config_dir (str, optional): Directory to read configs from.
            logger (logging.Logger, optional): Logger; built from the config when omitted.
            rng (optional): Source of randomness.

        Returns:
            IndexedMarkovChain: The configured chain.
        """
        config = load_config(environment=environment, config_dir=config_dir, logger=logger)
        if logger is None:
            logger = logger_from_config(config)

        settings = config["indexed"]
        base = {
            "config": {
                "from": settings["from"],
                "grams": settings["grams"],
                "backward": settings["backward"],
            }
        }
        return cls(
            base=base,
            separation=settings["separation"],
            logger=logger,
            rng=rng,
            max_steps=config["generation"]["max_steps"],
        )
