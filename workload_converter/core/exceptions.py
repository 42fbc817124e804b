class ConverterError(Exception):
    """Base exception for converter errors."""


class ManifestParseError(ConverterError):
    """Raised when a manifest cannot be loaded in strict mode."""


class DescriptorError(ConverterError):
    """Raised when a form descriptor file cannot be read or validated."""


class UnsupportedKindError(ConverterError):
    """Raised when a workload kind is not one of the supported kinds."""
