from .retry import RetryConfig, RetryExecutor

__all__ = ["RetryConfig", "RetryExecutor"]
