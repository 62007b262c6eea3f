class TalecalError(Exception):
    """Base error."""

class ConfigError(TalecalError):
    """Raised when a calendar payload cannot be decoded into a CalendarConfig."""

class TemplateError(TalecalError):
    """Base for display-template failures; the formatter never lets these escape."""

class TemplateSyntaxError(TemplateError):
    """Malformed template or expression."""

class UndefinedVariableError(TemplateError):
    """Expression referenced a name outside the template namespace."""
