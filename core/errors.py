"""Errors raised while building or parsing KSUIDs."""


class KsuidError(ValueError):
    """Base error with context for tracking what was rejected."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.context = context or {}
        self.cause = cause


class InvalidLengthError(KsuidError):
    """Byte array, payload or word array of the wrong size."""

    def __init__(self, message, expected=None, actual=None, **kwargs):
        context = kwargs.pop("context", {})
        if expected is not None:
            context["expected"] = expected
        if actual is not None:
            context["actual"] = actual
        super().__init__(message, context=context, **kwargs)


class InvalidFormatError(KsuidError):
    """String that is not 27 characters of the base-62 alphabet."""

    def __init__(self, message, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = value
        super().__init__(message, context=context, **kwargs)


class InvalidOverflowError(KsuidError):
    """Value that does not fit in 160 bits."""

    def __init__(self, message, value=None, **kwargs):
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = value
        super().__init__(message, context=context, **kwargs)


class ConfigError(KsuidError):
    """Invalid generator or logging configuration."""

    def __init__(self, message, key=None, **kwargs):
        context = kwargs.pop("context", {})
        if key:
            context["key"] = key
        super().__init__(message, context=context, **kwargs)
