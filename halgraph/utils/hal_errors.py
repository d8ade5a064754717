"""HalGraph Error Classes

Exception hierarchy shared by the HAL relation, curie, embedded and codec layers.
"""


class HalGraphError(Exception):
    """Base class for HalGraph errors."""
    pass


class CurieConfigurationError(HalGraphError, ValueError):
    """Raised when a curie namespace is declared with an invalid name or URI template."""
    pass


class EmbeddedStateError(HalGraphError):
    """Raised when an embedded wrapper is recognised but carries invalid state."""
    pass


class HalParseError(HalGraphError, ValueError):
    """Raised when a HAL document section cannot be parsed."""
    pass


class HalConfigurationError(HalGraphError):
    """Raised when there are HalGraph configuration loading or validation errors."""
    pass
