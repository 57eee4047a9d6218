from .config import ConfigHelper, ConfigItem, create_default_config
