"""Configuration validation for zip backup."""

from typing import Dict, Any

from ..core.archive import MIN_PASSWORD_BYTES


class ConfigValidator:
    """Validates zip backup configuration."""
    
    KNOWN_SECTIONS = ['archive', 'logging']
    LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
    
    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration data.
        
        Args:
            config: Configuration dictionary to validate.
            
        Raises:
            ValueError: If configuration is invalid.
        """
        self._validate_structure(config)
        
        if config.get('archive'):
            self._validate_archive_config(config['archive'])
        
        if config.get('logging'):
            self._validate_logging_config(config['logging'])
    
    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate basic configuration structure.
        
        Raises:
            ValueError: If the document is not a mapping of known sections.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")
        
        unknown_sections = [section for section in config if section not in self.KNOWN_SECTIONS]
        if unknown_sections:
            raise ValueError(f"Unknown configuration sections: {unknown_sections}")
        
        for section in self.KNOWN_SECTIONS:
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{section}' must be a dictionary")
    
    def _validate_archive_config(self, archive_config: Dict[str, Any]) -> None:
        """Validate archive configuration.
        
        Args:
            archive_config: Archive configuration dictionary.
            
        Raises:
            ValueError: If archive configuration is invalid.
        """
        if 'compression_level' in archive_config:
            level = archive_config['compression_level']
            if isinstance(level, bool) or not isinstance(level, int) or not (0 <= level <= 9):
                raise ValueError(f"Archive compression_level must be an integer 0-9: {level}")
        
        if 'password_bytes' in archive_config:
            size = archive_config['password_bytes']
            if isinstance(size, bool) or not isinstance(size, int) or size < MIN_PASSWORD_BYTES:
                raise ValueError(
                    f"Archive password_bytes must be an integer >= {MIN_PASSWORD_BYTES}: {size}"
                )
        
        for key in ['backups_dir', 'passwords_dir']:
            if key in archive_config:
                value = archive_config[key]
                if not isinstance(value, str) or not value.strip():
                    raise ValueError(f"Archive {key} must be a non-empty string")
                if value.startswith('/') or '..' in value.split('/'):
                    raise ValueError(f"Archive {key} must be relative to the target directory: {value}")
        
        if archive_config.get('backups_dir') is not None and \
                archive_config.get('backups_dir') == archive_config.get('passwords_dir'):
            raise ValueError("Archive backups_dir and passwords_dir must differ")
    
    def _validate_logging_config(self, logging_config: Dict[str, Any]) -> None:
        """Validate logging configuration.
        
        Raises:
            ValueError: If logging configuration is invalid.
        """
        level = logging_config.get('level')
        if level is not None and str(level).upper() not in self.LOG_LEVELS:
            raise ValueError(f"Invalid log level: {level}")
        
        log_file = logging_config.get('file')
        if log_file is not None and not isinstance(log_file, str):
            raise ValueError("Logging file must be a path string")
