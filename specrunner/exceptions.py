class SpecRunnerError(RuntimeError):
    """Base spec runner error."""

class SpecLoadError(SpecRunnerError):
    """Raised when a spec file cannot be turned into a Spec."""

class SpecFileError(SpecLoadError):
    """Raised when a spec file is missing or unreadable."""

class SpecParseError(SpecLoadError):
    """Raised when a spec file is not valid YAML or does not match the spec shape."""

class StepValidationError(SpecParseError):
    """Raised when a step is not a single-key action mapping or its payload is malformed."""

class ActionExecutionError(SpecRunnerError):
    """Raised when an action fails to execute."""

class UnknownActionError(ActionExecutionError):
    """Raised when a step names an action outside the registry."""

    def __init__(self, action: str):
        super().__init__(f"Unknown action: {action}")
        self.action = action

class LocatorError(ActionExecutionError):
    """Raised when a target element is not found or not actionable in time."""

class EngineError(ActionExecutionError):
    """Raised when the browser engine reports a fault (navigation, crash, bad key)."""
