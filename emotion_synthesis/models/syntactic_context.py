"""
Syntactic context data model.

Supplied by the grammar collaborator for the syntax/emotion integration pass.
"""

from dataclasses import dataclass
from enum import Enum


class SyntacticStructure(str, Enum):
    """Grammatical structures with dedicated integration behaviour."""
    
    QUESTION = 'question'
    SEQUENCE = 'sequence'
    DESCRIPTIVE = 'descriptive'
    REFERENCE_POINT = 'reference_point'
    SPATIAL_AGREEMENT = 'spatial_agreement'
    NARRATIVE = 'narrative'
    STATEMENT = 'statement'


# Structures that anchor the signing space to a stored reference point
REFERENTIAL_STRUCTURES = frozenset({'reference_point', 'spatial_agreement'})


@dataclass(frozen=True)
class SyntacticContext:
    """
    Grammatical context of an expression.
    
    Attributes:
        structure: Structure label; labels outside SyntacticStructure are accepted
        complexity: Syntactic complexity in [0, 1]
    """
    
    structure: str
    complexity: float = 0.5
    
    def __post_init__(self):
        """Validate syntactic context data."""
        if isinstance(self.structure, SyntacticStructure):
            object.__setattr__(self, 'structure', self.structure.value)
        if not isinstance(self.structure, str) or not self.structure:
            raise ValueError(f"structure must be non-empty string, got {self.structure!r}")
        if isinstance(self.complexity, bool) or not isinstance(self.complexity, (int, float)):
            raise ValueError(f"complexity must be numeric, got {type(self.complexity)}")
        if not 0.0 <= self.complexity <= 1.0:
            raise ValueError(f"complexity must be between 0.0 and 1.0, got {self.complexity}")
    
    @property
    def is_referential(self) -> bool:
        return self.structure in REFERENTIAL_STRUCTURES
