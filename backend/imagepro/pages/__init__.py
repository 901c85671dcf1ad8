from .state import FeatureSession, PageState

__all__ = ["FeatureSession", "PageState"]
