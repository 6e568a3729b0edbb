from .config import LogLevel, PortalSettings, load_settings_from_env
from .access import AccessGate, DistinguishedIds
from .bootstrap import CompositeTemplateBootstrap
from .events import PortalEvents, publish_best_effort
from .exceptions import (
    ConfigurationError,
    EventDeliveryError,
    PortalConfigError,
    StorageError,
    TemplateNotFoundError,
    UnsupportedNodeError,
)
from .facade import UserPortalConfigService
from .logging import (
    PortalLogFormatter,
    PortalLoggerAdapter,
    get_portal_logger,
    safe_preview,
    setup_logging,
)
from .models import (
    Application,
    CloneState,
    Container,
    ModelChange,
    NavigationTree,
    NavNode,
    OwnerType,
    Page,
    PageList,
    PersistentState,
    PortalDescriptor,
    Query,
    TransientState,
    UserPortalConfig,
)
from .navigation import NavigationResolver
from .ownership import rewrite_ownership

__all__ = [
    'AccessGate',
    'Application',
    'CloneState',
    'CompositeTemplateBootstrap',
    'ConfigurationError',
    'Container',
    'DistinguishedIds',
    'EventDeliveryError',
    'LogLevel',
    'ModelChange',
    'NavNode',
    'NavigationResolver',
    'NavigationTree',
    'OwnerType',
    'Page',
    'PageList',
    'PersistentState',
    'PortalConfigError',
    'PortalDescriptor',
    'PortalEvents',
    'PortalLogFormatter',
    'PortalLoggerAdapter',
    'PortalSettings',
    'Query',
    'StorageError',
    'TemplateNotFoundError',
    'TransientState',
    'UnsupportedNodeError',
    'UserPortalConfig',
    'UserPortalConfigService',
    'get_portal_logger',
    'load_settings_from_env',
    'publish_best_effort',
    'rewrite_ownership',
    'safe_preview',
    'setup_logging',
]
