"""Error types raised by the vision pipelines."""


class VisionError(Exception):
    """Base class for every error raised by the analysis pipelines."""


class LoadError(VisionError, ValueError):
    """The image could not be fetched or decoded."""


class AnalysisTimeout(VisionError, TimeoutError):
    """An image load or capability call exceeded its time budget."""


class CapabilityUnavailable(VisionError, RuntimeError):
    """An external model or service is not loaded, unreachable or returned garbage."""


class InsufficientSamples(VisionError):
    """Too few pixels survived a feature filter.

    Raised and caught inside a single feature stage; analyzers turn it into
    a floor-confidence default and never let it reach the caller.
    """

    def __init__(self, feature, count, required):
        super().__init__(f"{feature}: {count} valid pixels, {required} required")
        self.feature = feature
        self.count = count
        self.required = required


__all__ = [
    "AnalysisTimeout",
    "CapabilityUnavailable",
    "InsufficientSamples",
    "LoadError",
    "VisionError",
]
