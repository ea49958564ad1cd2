"""Command-line interface for zip backup."""

import logging
import sys
import click
from typing import Optional

from .config.config_manager import ConfigManager
from .core.models import BackupKind
from .core.runner import BackupRunner
from .errors import BackupError, PreconditionError
from .utils.formatters import format_file_size, format_timestamp

USAGE_EXIT_CODE = 1
IO_ERROR_EXIT_CODE = 2


class BackupUsageError(click.UsageError):
    """Malformed or contradictory command-line arguments."""
    exit_code = USAGE_EXIT_CODE


class BackupCommand(click.Command):
    """Command whose argument parsing errors exit with status 1."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = USAGE_EXIT_CODE
            raise


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Set up root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Add file handler if specified
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


@click.command(cls=BackupCommand)
@click.argument('source', type=click.Path())
@click.argument('target', type=click.Path())
@click.option('--full', is_flag=True,
              help='Back up every file')
@click.option('--incremental', is_flag=True,
              help='Back up files changed since the most recent backup')
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level (overrides the configuration file)')
@click.option('--log-file',
              help='Log file path (overrides the configuration file)')
@click.pass_context
def cli(ctx, source: str, target: str, full: bool, incremental: bool,
        config_path: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """Back up SOURCE into an encrypted zip archive under TARGET.

    Archives are written to TARGET/backups and the password of each archive
    to TARGET/passwords.
    """
    if full == incremental:
        raise BackupUsageError("Must specify exactly one of --full or --incremental", ctx=ctx)
    kind = BackupKind.FULL if full else BackupKind.INCREMENTAL

    try:
        config_manager = ConfigManager(config_path)
        config_manager.load_config()
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(USAGE_EXIT_CODE)

    logging_config = config_manager.get_logging_config()
    setup_logging(log_level or logging_config.get('level', 'INFO'),
                  log_file or logging_config.get('file'))

    logger = logging.getLogger(__name__)
    if config_manager.loaded_from:
        logger.info(f"Using configuration from {config_manager.loaded_from}")
    else:
        logger.info("No configuration file found, using defaults")

    try:
        runner = BackupRunner(config_manager.get_archive_config())
        result = runner.run(source, target, kind)
    except PreconditionError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(USAGE_EXIT_CODE)
    except (BackupError, OSError) as e:
        click.echo(f"❌ Backup failed: {e}", err=True)
        sys.exit(IO_ERROR_EXIT_CODE)

    click.echo(f"\n📊 {kind.name.capitalize()} backup summary:")
    click.echo(f"  Changed since: {format_timestamp(result.threshold)}")
    click.echo(f"  Files scanned: {result.scanned_count:,}")
    click.echo(f"  Files archived: {result.file_count:,} ({format_file_size(result.total_size)})")

    if result.archive_path:
        click.echo(f"  📦 Archive: {result.archive_path}")
        click.echo(f"  🔑 Password file: {result.password_path}")
        click.echo("✅ Backup completed")
    else:
        click.echo("✅ Nothing changed - no archive written")


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
