"""
ausbiz_shared — shared configuration, constants, errors, and the Canonical
Dataset for the ausbiz dashboard.

Usage:
    from ausbiz_shared.config import settings
    from ausbiz_shared.dataset import Dataset
    from ausbiz_shared.models.series import CategoricalSeries, TimeSeries
    from ausbiz_shared.errors import ValidationError
"""

__version__ = "0.1.0"
