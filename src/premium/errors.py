from __future__ import annotations


class PremiumError(Exception):
    """Base class for every failure raised by the premium pipeline."""


class DataLoadError(PremiumError):
    pass


class SchemaError(PremiumError):
    pass


class ValidationError(PremiumError):
    """Inbound feature record is missing fields or carries non-numeric values."""


class ArtifactLoadError(PremiumError):
    pass


class DegenerateFitError(PremiumError):
    """A fit is undefined for the given data (zero variance, too few points)."""


class PredictionError(PremiumError):
    pass
