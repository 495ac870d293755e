from .base import BaseViewModel
from .signal import Computed, ObservableProperty, Signal

__all__ = ["BaseViewModel", "Computed", "ObservableProperty", "Signal"]
