import pytest
from ngram_chain.data_preprocessing.text_preprocessor import TextPreprocessor


@pytest.fixture
def preprocessor():
    """Fixture to initialize the TextPreprocessor."""
    return TextPreprocessor()


def test_handle_whitespace(preprocessor):
    text = "  This   is \t a    test.  "
    assert preprocessor.handle_whitespace(text) == "This is a test."


def test_tokenize(preprocessor):
    assert preprocessor.tokenize("This is a test.") == ["This", "is", "a", "test."]
    assert preprocessor.tokenize("  many    spaces ") == ["many", "spaces"]
    assert preprocessor.tokenize("") == []


def test_tokenize_custom_separation():
    preprocessor = TextPreprocessor(separation=";")
    assert preprocessor.tokenize("a;;b c;") == ["a", "b c"]
    assert not preprocessor.splits_on_whitespace


def test_none_separation_splits_on_whitespace():
    preprocessor = TextPreprocessor(separation=None)
    assert preprocessor.splits_on_whitespace
    assert preprocessor.tokenize("a\tb\nc") == ["a", "b", "c"]


def test_invalid_separation():
    with pytest.raises(ValueError):
        TextPreprocessor(separation="")
    with pytest.raises(TypeError):
        TextPreprocessor(separation=3)


def test_strip_markers(preprocessor):
    text = "%startf% %startf% hi there %endf% %endf%"
    assert preprocessor.strip_markers(text, "%startf%", "%endf%") == "hi there"


def test_strip_markers_escapes_regex(preprocessor):
    text = "(s)+ word [e]*"
    assert preprocessor.strip_markers(text, "(s)+", "[e]*") == "word"
