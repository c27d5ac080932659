from ausbiz_shared.models.series import CategoricalSeries, TimeSeries

__all__ = ["CategoricalSeries", "TimeSeries"]
