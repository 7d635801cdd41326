"""Configuration errors raised while loading config.yaml and the environment."""

from typing import Any, Dict, List, Optional

ENVIRONMENT_SOURCE = "environment"


class ConfigurationError(Exception):
    """Startup configuration is unusable.

    Attributes:
        message: Primary error message
        errors: One line per invalid setting
        suggestions: Hints printed after the errors
        source: Where the bad settings came from: a YAML path, or "environment"
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        source: Optional[str] = None,
    ):
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        self.source = source
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        header = f"{self.message} ({self.source})" if self.source else self.message
        lines = [header]

        if self.errors:
            lines.append("\nValidation Errors:")
            lines.extend(f"  {i}. {error}" for i, error in enumerate(self.errors, 1))

        if self.suggestions:
            lines.append("\nSuggestions:")
            lines.extend(f"  - {suggestion}" for suggestion in self.suggestions)

        return "\n".join(lines)

    def log_fields(self) -> Dict[str, Any]:
        """Structured fields for the config.error log record."""
        return {
            "config_source": self.source or "defaults",
            "error_count": len(self.errors),
            "errors": self.errors,
        }
