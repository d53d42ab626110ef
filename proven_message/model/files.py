"""
Message model file types.

A message model is made of one JSON-LD context file, one or more ontology
files and one or more SHACL shapes files, recognized by file name.
"""

import re
from enum import Enum

MODEL_REGISTRY_FILE = "model-files"


class MessageModelFile(Enum):
    """Model file kinds with the file name pattern that identifies them."""

    CONTEXT = r".*\.context$"
    ONTOLOGY = r".*\.jsonld$"
    SHAPES = r".*\.shapes\.jsonld$"

    @property
    def pattern(self) -> re.Pattern:
        return re.compile(self.value)

    @classmethod
    def file_type(cls, file_name: str) -> "MessageModelFile | None":
        """
        Classify a file name; None if it is not a model file.

        Later kinds win, so a ``.shapes.jsonld`` file is a shapes file even
        though it also matches the ontology pattern.
        """
        found = None
        for kind in (cls.CONTEXT, cls.ONTOLOGY, cls.SHAPES):
            if kind.pattern.fullmatch(file_name):
                found = kind
        return found
