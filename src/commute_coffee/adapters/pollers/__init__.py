"""Background pollers."""

from commute_coffee.adapters.pollers.refresh_poller import RefreshPoller

__all__ = ["RefreshPoller"]
