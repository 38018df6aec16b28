"""Built-in metric collectors, registered on import in pipeline order."""

from .fans import FanMetricsCollector
from .merchandise import MerchandiseCollector
from .advertising import AdvertisingCollector
from .demographics import DemographicsCollector
from .visits import BitlyCollector, VisitsCollector

__all__ = [
    'FanMetricsCollector',
    'MerchandiseCollector',
    'AdvertisingCollector',
    'DemographicsCollector',
    'VisitsCollector',
    'BitlyCollector',
]
