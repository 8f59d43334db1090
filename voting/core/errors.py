"""Error Hierarchy — one exception class per way a voting operation can be refused.

Invariants:
    - Each class fixes its code, category, severity and HTTP status as class
      attributes; instances only add the message and context
    - Domain rejections are raised before any state mutation
    - to_response() produces the REST envelope; the message never echoes
      free-text user input

Design Decisions:
    - Single VotingError base: one FastAPI handler serves every subclass
    - ErrorContext is filled in by the service layer, where election id,
      principal and operation name are known
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar


class ErrorSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Where and for whom an operation failed."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    election_id: str | None = None
    principal: str | None = None
    operation: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class VotingError(Exception):
    """Base for every refusal the voting service can report."""

    code: ClassVar[str] = "VOTING_ERROR"
    category: ClassVar[ErrorCategory] = ErrorCategory.INTERNAL
    severity: ClassVar[ErrorSeverity] = ErrorSeverity.ERROR
    http_status: ClassVar[int] = 500

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        ctx = self.context
        return {
            "error": {
                "code": self.code,
                "message": ctx.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": ctx.timestamp.isoformat(),
                "context": {
                    "election_id": ctx.election_id,
                    "principal": ctx.principal,
                    "operation": ctx.operation,
                },
            }
        }


# --- Workflow rejections ------------------------------------------------------

class UnauthorizedError(VotingError):
    """Caller lacks the role the operation requires."""
    code = "UNAUTHORIZED"
    category = ErrorCategory.AUTHORIZATION
    http_status = 403

    def __init__(self, principal: str, role: str, context: ErrorContext | None = None):
        super().__init__(f"Caller '{principal}' is not {role}", context)
        self.principal = principal
        self.role = role


class InvalidPhaseError(VotingError):
    """Operation not allowed in the current workflow phase."""
    code = "INVALID_PHASE"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 409

    def __init__(self, current: str, required: str, context: ErrorContext | None = None):
        super().__init__(
            f"Operation requires phase '{required}', current phase is '{current}'",
            context,
        )
        self.current = current
        self.required = required


class PhaseAlreadyActiveError(VotingError):
    code = "PHASE_ALREADY_ACTIVE"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(f"Phase '{status}' is already active", context)
        self.status = status


class InvalidTransitionError(VotingError):
    """Target phase is not the successor of the current one."""
    code = "INVALID_TRANSITION"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 409

    def __init__(self, current: str, target: str, context: ErrorContext | None = None):
        super().__init__(f"Cannot move from '{current}' to '{target}'", context)
        self.current = current
        self.target = target


class AlreadyRegisteredError(VotingError):
    code = "ALREADY_REGISTERED"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, principal: str, context: ErrorContext | None = None):
        super().__init__(f"Voter '{principal}' is already registered", context)
        self.principal = principal


class EmptyProposalError(VotingError):
    code = "EMPTY_PROPOSAL"
    category = ErrorCategory.VALIDATION
    http_status = 400

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("Proposal description cannot be empty", context)


class DuplicateProposalError(VotingError):
    """Exact same description already registered. Message omits the text."""
    code = "DUPLICATE_PROPOSAL"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, description: str, context: ErrorContext | None = None):
        super().__init__("A proposal with this description already exists", context)
        self.description = description


class NoProposalsError(VotingError):
    code = "NO_PROPOSALS"
    category = ErrorCategory.BUSINESS_RULE
    http_status = 400

    def __init__(self, context: ErrorContext | None = None):
        super().__init__("No proposals have been registered", context)


class AlreadyVotedError(VotingError):
    code = "ALREADY_VOTED"
    category = ErrorCategory.CONFLICT
    http_status = 409

    def __init__(self, principal: str, context: ErrorContext | None = None):
        super().__init__(f"Voter '{principal}' has already voted", context)
        self.principal = principal


class NoSuchProposalError(VotingError):
    code = "NO_SUCH_PROPOSAL"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(self, proposal_id: int, context: ErrorContext | None = None):
        super().__init__(f"Proposal {proposal_id} does not exist", context)
        self.proposal_id = proposal_id


class TieDetectedError(VotingError):
    """Two or more proposals share the maximum vote count."""
    code = "TIE_DETECTED"
    category = ErrorCategory.BUSINESS_RULE
    severity = ErrorSeverity.WARNING
    http_status = 409

    def __init__(
        self, proposal_ids: list[int], max_votes: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Tie between proposals {proposal_ids} with {max_votes} vote(s) each",
            context,
        )
        self.proposal_ids = proposal_ids
        self.max_votes = max_votes


class ResourceNotFoundError(VotingError):
    code = "RESOURCE_NOT_FOUND"
    category = ErrorCategory.RESOURCE_NOT_FOUND
    http_status = 404

    def __init__(
        self, resource_type: str, resource_id: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(f"{resource_type} '{resource_id}' not found", context)
        self.resource_type = resource_type
        self.resource_id = resource_id


# --- Store failures -----------------------------------------------------------

class DatabaseError(VotingError):
    """Election store unavailable or rejected a write."""
    code = "DATABASE_ERROR"
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.CRITICAL
    http_status = 503

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(f"Election store {operation} failed: {message}", context)
        self.operation = operation
