"""Configuration management for the zip backup tool."""

import copy
import os
import yaml
from typing import Dict, Any, Optional
from .config_validator import ConfigValidator


class ConfigManager:
    """Manages configuration loading and validation for backup runs."""
    
    DEFAULT_CONFIG_LOCATIONS = [
        "zip-backup.yaml",
        "zip-backup.yml",
        os.path.expanduser("~/.zip-backup/config.yaml"),
        os.path.expanduser("~/.zip-backup/config.yml"),
        "/etc/zip-backup/config.yaml",
        "/etc/zip-backup/config.yml"
    ]
    
    DEFAULTS = {
        'archive': {
            'compression_level': 6,
            'password_bytes': 20,
            'backups_dir': 'backups',
            'passwords_dir': 'passwords'
        },
        'logging': {
            'level': 'INFO',
            'file': None
        }
    }
    
    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.
        
        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations and fall back
                        to built-in defaults.
        """
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}
        self.loaded_from: Optional[str] = None
        self.validator = ConfigValidator()
        
    def load_config(self) -> Dict[str, Any]:
        """Load configuration from file, if any.
        
        Returns:
            Dictionary containing configuration data.
            
        Raises:
            FileNotFoundError: If an explicit config file does not exist.
            ValueError: If config file is invalid.
        """
        config_file = self._find_config_file()
        self.config_data = {}
        
        if config_file:
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    self.config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in config file {config_file}: {e}")
            except OSError as e:
                raise ValueError(f"Error reading config file {config_file}: {e}")
            self.loaded_from = config_file
        
        # Validate configuration
        self.validator.validate(self.config_data)
        
        # Set defaults
        self._set_defaults()
        
        return self.config_data
    
    def _find_config_file(self) -> Optional[str]:
        """Find configuration file in default locations.
        
        Returns:
            Path to configuration file, or None if there is none.
            
        Raises:
            FileNotFoundError: If the explicit config path does not exist.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
        
        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location
        
        return None
    
    def _set_defaults(self):
        """Set default values for optional configuration parameters."""
        for section, section_defaults in self.DEFAULTS.items():
            if not self.config_data.get(section):
                self.config_data[section] = {}
            for key, value in section_defaults.items():
                if key not in self.config_data[section]:
                    self.config_data[section][key] = copy.deepcopy(value)
    
    def get_archive_config(self) -> Dict[str, Any]:
        """Get archive configuration.
        
        Returns:
            Archive configuration dictionary.
        """
        return self.config_data.get('archive', {})
    
    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.
        
        Returns:
            Logging configuration dictionary.
        """
        return self.config_data.get('logging', {})
