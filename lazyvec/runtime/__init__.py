from .config import Config, get_config
from .manager import BufferManager, get_manager
