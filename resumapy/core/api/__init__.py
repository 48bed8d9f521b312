"""HTTP, auth and configuration layer."""
from .config import APIConfig, ProxyConfig, SSLConfig, TimeoutConfig, RetryConfig
from .transport import AiohttpTransport, HTTPResponse
from .async_auth import TokenRefreshService
from .events import EventEmitter, UploadEvents
from .retry import RetryStrategy, BudgetRetryStrategy

__all__ = [
    # Transport
    'AiohttpTransport',
    'HTTPResponse',
    
    # Auth
    'TokenRefreshService',
    
    # Configuration
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    
    # Retry
    'RetryStrategy',
    'BudgetRetryStrategy',
    
    # Events
    'EventEmitter',
    'UploadEvents',
]
