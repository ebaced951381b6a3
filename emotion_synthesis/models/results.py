"""
Result data models for synthesis, validation and integration.

Public operations return these tagged values instead of raising, so that
callers can inspect failed or degraded results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from .analyzed_emotion import ExpressionMetrics
from .expression import LSFExpression


ErrorType = Literal['input', 'validation', 'recursion', 'ethics', 'internal']
Severity = Literal['error', 'warning']


@dataclass(frozen=True)
class ValidationIssue:
    """
    Single validation finding.
    
    Attributes:
        type: Issue category (e.g. 'missing_channel', 'syntactic')
        severity: 'error' or 'warning'
        message: Human-readable description
        component: Channel or control stage concerned
    """
    
    type: str
    severity: Severity
    message: str
    component: Optional[str] = None
    
    def __str__(self) -> str:
        return self.message


@dataclass
class ValidationResult:
    """Result of a validation operation."""
    
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    score: float = 1.0
    
    def __bool__(self) -> bool:
        """
        Allows ValidationResult to be used in boolean context.
        
        Returns:
            True if validation succeeded, False otherwise.
        """
        return self.is_valid
    
    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == 'error']
    
    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == 'warning']
    
    @classmethod
    def success_result(cls, issues: Optional[List[ValidationIssue]] = None,
                       score: float = 1.0) -> 'ValidationResult':
        """
        Creates a successful validation result.
        
        Args:
            issues: Optional non-blocking warnings
            score: Validation score
            
        Returns:
            ValidationResult with is_valid=True.
        """
        return cls(is_valid=True, issues=list(issues or []), score=score)
    
    @classmethod
    def failure_result(cls, issues: List[ValidationIssue],
                       score: float = 0.0) -> 'ValidationResult':
        """
        Creates a failed validation result.
        
        Args:
            issues: Issues found
            score: Validation score
            
        Returns:
            ValidationResult with is_valid=False.
        """
        return cls(is_valid=False, issues=list(issues), score=score)


@dataclass
class CoherenceResult:
    """Outcome of coherence validation; issues are accumulated in check order."""
    
    is_coherent: bool
    issues: List[str] = field(default_factory=list)
    score: float = 1.0
    
    def __bool__(self) -> bool:
        return self.is_coherent


@dataclass
class SynthesisResult:
    """
    Tagged result of a synthesis request.
    
    Attributes:
        success: True when an expression was produced and passed structural validation
        expression: Produced (or partial, on validation failure) expression
        metrics: Quality metrics including coherence
        issues: Coherence or validation issue messages
        error_type: Failure category when success is False
        error_message: Failure description when success is False
        correlation_id: Request correlation ID
    """
    
    success: bool
    expression: Optional[LSFExpression] = None
    metrics: Optional[ExpressionMetrics] = None
    issues: List[str] = field(default_factory=list)
    error_type: Optional[ErrorType] = None
    error_message: Optional[str] = None
    correlation_id: Optional[str] = None
    
    def __bool__(self) -> bool:
        return self.success
    
    @property
    def is_degraded(self) -> bool:
        """True for a successful result that failed coherence rules."""
        return self.success and bool(self.issues)
    
    @classmethod
    def failure(cls, error_type: ErrorType, message: str,
                expression: Optional[LSFExpression] = None,
                issues: Optional[List[str]] = None) -> 'SynthesisResult':
        """Build a failed result, optionally carrying a partial expression."""
        return cls(
            success=False,
            expression=expression,
            issues=list(issues or []),
            error_type=error_type,
            error_message=message
        )


@dataclass(frozen=True)
class EthicsRequest:
    """Request sent to the ethics collaborator."""
    
    action_type: str
    action_details: Dict[str, Any]
    context: Dict[str, Any]


@dataclass(frozen=True)
class EthicsDecision:
    """Decision returned by the ethics collaborator."""
    
    approved: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class ControlMetadata:
    """
    Quality report of the syntax/emotion integration pass.
    
    Attributes:
        syntactic_control: Syntactic control quality in [0, 1]
        temporal_control: Temporal control quality in [0, 1]
        spatial_control: Spatial control quality in [0, 1]
        global_quality: Weighted combination of the three
        ethics_validation: Decision of the ethics collaborator
    """
    
    syntactic_control: float
    temporal_control: float
    spatial_control: float
    global_quality: float
    ethics_validation: EthicsDecision
    
    def __post_init__(self):
        """Validate score ranges."""
        for name in ('syntactic_control', 'temporal_control', 'spatial_control', 'global_quality'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0, got {value}")


@dataclass
class ControlledExpression:
    """Expression after syntax/emotion integration, with its quality report."""
    
    expression: LSFExpression
    metadata: ControlMetadata


@dataclass
class IntegrationResult:
    """
    Tagged result of an integration request.
    
    Attributes:
        success: True when a controlled expression was produced
        controlled: Controlled expression (None on failure)
        validation: Combined validation of the three control stages
        error_type: Failure category when success is False
        reason: Rejection or failure reason
        correlation_id: Request correlation ID
    """
    
    success: bool
    controlled: Optional[ControlledExpression] = None
    validation: Optional[ValidationResult] = None
    error_type: Optional[ErrorType] = None
    reason: Optional[str] = None
    correlation_id: Optional[str] = None
    
    def __bool__(self) -> bool:
        return self.success
    
    @classmethod
    def failure(cls, error_type: ErrorType, reason: str) -> 'IntegrationResult':
        """Build a failed result carrying no expression."""
        return cls(success=False, error_type=error_type, reason=reason)
