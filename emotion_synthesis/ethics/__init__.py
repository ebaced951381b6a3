"""Ethics gate collaborators."""

from .ethics_validator import EthicsValidator, RuleBasedEthicsValidator

__all__ = ['EthicsValidator', 'RuleBasedEthicsValidator']
