from restarter.navigation.aggregator import NavigationAggregator, NavigationSources
from restarter.navigation.history import HistoryInterceptor
from restarter.navigation.scheduler import DebounceScheduler

__all__ = ["NavigationAggregator", "NavigationSources", "HistoryInterceptor", "DebounceScheduler"]
