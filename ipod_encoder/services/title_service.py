"""
This module builds the per-file titles of a batch.

When a whole series is encoded in one run, each output is titled after the base
title plus the episode number, e.g. "Show-1" for "Video-01.avi". The number
comes from a `NumberExtractor`: either a regular expression applied to the file
name, or a counter handing out 1, 2, 3... in argument order. A standalone run
uses the base title unchanged.
"""

import re
from pathlib import Path
from typing import Optional, Pattern, Union

from loguru import logger

from ..domain.exceptions import TitleGenerationError

# Catches "_01", "-1", " 12" and the like; leading zeros are dropped.
DEFAULT_NUMBER_PATTERN = r"[_\W]0*(\d+)"


class NumberExtractor:
    """Base class of the episode number strategies."""

    def extract(self, filename: Union[str, Path]) -> Optional[Union[int, str]]:
        raise NotImplementedError("Subclasses must implement extract().")

    def describe(self) -> str:
        return self.__class__.__name__


class PatternNumberExtractor(NumberExtractor):
    """
    Finds the episode number in a file's name using a regular expression.

    The text of the first capture group of the first match is used as is, so the
    pattern decides whether leading zeros are kept. Only the base name is
    searched, so digits in directory names are never picked up.
    """

    def __init__(self, pattern: Union[str, Pattern[str], None] = None):
        try:
            self.pattern = re.compile(pattern if pattern is not None else DEFAULT_NUMBER_PATTERN)
        except re.error as e:
            raise TitleGenerationError(f"Invalid number pattern '{pattern}': {e}") from e
        if self.pattern.groups < 1:
            raise TitleGenerationError(f"Number pattern '{self.pattern.pattern}' needs a capture group.")

    def extract(self, filename: Union[str, Path]) -> Optional[str]:
        match = self.pattern.search(Path(filename).name)
        if not match or not match.group(1):
            return None
        return match.group(1)

    def describe(self) -> str:
        return f"pattern '{self.pattern.pattern}'"


class GeneratedNumberExtractor(NumberExtractor):
    """Ignores the file name and numbers files in the order they are asked for."""

    def __init__(self, start: int = 1):
        self.next_number = start

    def extract(self, filename: Union[str, Path]) -> Optional[int]:
        number = self.next_number
        self.next_number += 1
        return number

    def describe(self) -> str:
        return "sequential numbering"


class TitleStrategy:
    """Base class of the title strategies."""

    def title_for(self, base_title: str, filename: Union[str, Path]) -> str:
        raise NotImplementedError("Subclasses must implement title_for().")


class NumberedTitleStrategy(TitleStrategy):
    """Titles each file `<base>-<number>`."""

    def __init__(self, extractor: Optional[NumberExtractor] = None):
        self.extractor = extractor or PatternNumberExtractor()

    def title_for(self, base_title: str, filename: Union[str, Path]) -> str:
        number = self.extractor.extract(filename)
        if number is None:
            raise TitleGenerationError(
                f"Unable to extract episode number from '{Path(filename).name}' using {self.extractor.describe()}"
            )
        decorated_title = f"{base_title}-{number}"
        logger.debug(
            f"Title for '{Path(filename).name}' is '{decorated_title}', extracted using {self.extractor.describe()}"
        )
        return decorated_title


class StandaloneTitleStrategy(TitleStrategy):
    """Uses the base title as is. Only meaningful for a single input."""

    def title_for(self, base_title: str, filename: Union[str, Path]) -> str:
        return base_title
