"""
Helpers for feeding sentences from files into a chain.

CSV files are read with pandas, one sentence per cell of the chosen column.
Any other file is read as plain text, one sentence per line.
"""

import os

import pandas as pd

from ngram_chain.utils.loggers.json_logger import get_logger

logger = get_logger("ngram_chain.corpus_loader")


def read_csv_sentences(file_path, column=0):
    """
    Reads one column of a CSV file as a list of sentences.

    Args:
        file_path (str): Path to the CSV file.
        column (int or str): Column position or column name.

    Returns:
        list of str: The non-blank cells of the column, in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If the named column is missing.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Corpus file not found: {file_path}")

    df = pd.read_csv(file_path)
    series = df.iloc[:, column] if isinstance(column, int) else df[column]

    sentences = [str(cell) for cell in series.dropna() if str(cell).strip()]
    logger.info(f"Read {len(sentences)} sentences from {file_path}")
    return sentences


def read_text_sentences(file_path):
    """
    Reads a text file with one sentence per line, skipping blank lines.

    Args:
        file_path (str): Path to the text file.

    Returns:
        list of str: The sentences.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        sentences = [line.strip() for line in f if line.strip()]

    logger.info(f"Read {len(sentences)} sentences from {file_path}")
    return sentences


def train_from_files(chain, file_paths, column=0):
    """
    Trains a chain on the sentences of several files.

    Args:
        chain: A MarkovChain or IndexedMarkovChain.
        file_paths (list of str): CSV or text files.
        column (int or str): Column used for CSV files.

    Returns:
        The trained chain.
    """
    total = 0
    for file_path in file_paths:
        if file_path.lower().endswith(".csv"):
            sentences = read_csv_sentences(file_path, column=column)
        else:
            sentences = read_text_sentences(file_path)
        chain.train(sentences)
        total += len(sentences)

    logger.info("Training from files finished", extra={
        "metrics": {"files": len(file_paths), "sentences": total}
    })
    return chain
