from .find_viewmodel import FindViewModel, use_find

__all__ = ["FindViewModel", "use_find"]
