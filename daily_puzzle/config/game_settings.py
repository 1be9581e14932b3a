"""
Puzzle Configuration Constants Module

Board dimensions and the secret-word list. The word list is loaded from
words.json (or a path given by the caller) and validated before use.
"""

import json
import os
from typing import List, Final, Optional

# Reference board dimensions
WORD_LENGTH: Final[int] = 5
ATTEMPT_COUNT: Final[int] = 6

DEFAULT_WORD_LIST_PATH: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'words.json'
)


def load_word_list(path: Optional[str] = None, word_length: int = WORD_LENGTH) -> List[str]:
    """
    Load the secret-word list from a JSON file.

    Args:
        path: JSON file holding an array of words; defaults to words.json
        word_length: Required length of every word

    Returns:
        List[str]: Lowercase words in file order

    Raises:
        FileNotFoundError: If the file is not found
        ValueError: If the file is malformed or a word fails validation
    """
    json_file_path = path or DEFAULT_WORD_LIST_PATH

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_list = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {json_file_path}: {e}")

    if not isinstance(word_list, list):
        raise ValueError("JSON file must contain an array of words")

    words = [str(word).strip().lower() for word in word_list]
    validate_word_list_integrity(words, word_length)
    return words


def validate_word_list_integrity(words: List[str], word_length: int = WORD_LENGTH) -> bool:
    """
    Validates the integrity and consistency of a word list.

    Checks that the list is non-empty and that every word has the
    configured length, is alphabetic, lowercase and unique.

    Returns:
        bool: True if word list passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if len(word) != word_length:
            raise ValueError(f"Word at index {index} '{word}' is not {word_length} characters long")

        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

        if not word.islower():
            raise ValueError(f"Word at index {index} '{word}' is not in lowercase format")

    if len(words) != len(set(words)):
        seen = set()
        duplicates = sorted({word for word in words if word in seen or seen.add(word)})
        raise ValueError(f"Duplicate words found in word list: {duplicates}")

    return True
