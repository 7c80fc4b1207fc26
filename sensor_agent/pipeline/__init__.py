from .change_filter import ChangeFilter

__all__ = ["ChangeFilter"]
