# service-wide exception types for retrieval, tool execution, and agent orchestration
# NOTE: errors raised inside tools are folded back into the conversation by the agent kernel,
# only orchestration errors (e.g. InvalidResponse) propagate to the caller.

class JournalBrainError(Exception):
    """Base class for all errors raised by the service."""

# =====================================================================
# Retrieval query errors
# =====================================================================

class InvalidQuery(JournalBrainError):
    """A retrieve request could not be turned into a valid query."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid query: {reason}")

class UnsupportedGranularity(InvalidQuery):
    """Summaries are only bucketed by month or year."""
    def __init__(self, granularity: str | None):
        self.granularity = granularity
        super().__init__(
            f"timeGranularity '{granularity}' is not supported for summaries, use 'month' or 'year'"
        )

class InvalidDate(InvalidQuery):
    """A date filter was not a valid ISO-8601 string."""
    def __init__(self, field: str, value: object):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be an ISO-8601 date, got {value!r}")

# =====================================================================
# Tool errors
# =====================================================================

class ToolNotFound(JournalBrainError):
    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available or []
        super().__init__(f"Tool not found: '{name}'. Available tools: {', '.join(self.available) or 'none'}")

class ToolExecutionFailed(JournalBrainError):
    def __init__(self, name: str, cause: BaseException):
        self.name = name
        self.cause = cause
        super().__init__(f"Tool '{name}' execution failed: {cause}")

class InvalidToolArguments(JournalBrainError):
    """Raised by a tool when its arguments don't match its schema."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid arguments: {reason}")

class ResultNotFound(JournalBrainError):
    def __init__(self, result_id: str):
        self.result_id = result_id
        super().__init__(
            f"Cached result not found: '{result_id}'. Make sure you pass the resultId from a previous retrieve call."
        )

# =====================================================================
# Orchestration errors
# =====================================================================

class InvalidResponse(JournalBrainError):
    """The model returned neither text nor tool calls. Fatal for the current run."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid response from model: {message}")
