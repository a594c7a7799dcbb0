#!/usr/bin/env python3
"""
altFINS Monitor - CLI Entry Point
=================================

Runs one of the two polling monitors and forwards alerts to Telegram.

Monitors:
    - price:  alerts when the tracked asset moves more than the threshold
              from the last alerted price (checked every minute, on the minute)
    - signal: alerts once per new signal from the signals feed
              (checked at a fixed rate)

Usage:
    # Start the price monitor
    python scripts/run_monitor.py price

    # Signal monitor, console alerts only
    python scripts/run_monitor.py signal --dry-run

    # Test Telegram configuration
    python scripts/run_monitor.py price --test-telegram
"""

import argparse
import logging
import sys
from datetime import datetime
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from altfins_alerts import settings
from altfins_alerts.alerts.telegram import TelegramNotifier, send_test_alert
from altfins_alerts.api.altfins import AltfinsClient
from altfins_alerts.exceptions import FetchError
from altfins_alerts.factory import MONITOR_TYPES, build_monitor
from altfins_alerts.monitor.service import MonitorService


def setup_logging(monitor: str, log_level: str = settings.LOG_LEVEL, log_file: str = settings.LOG_FILE):
    """Configure logging for the monitor service."""
    log_path = Path(log_file)
    if not log_path.is_absolute():
        log_path = project_root / log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Date-stamped log file per monitor (e.g., logs/monitor_price_2026-01-18.log)
    date_str = datetime.now().strftime("%Y-%m-%d")
    dated_log_file = log_path.parent / f"{log_path.stem}_{monitor}_{date_str}{log_path.suffix}"

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    file_handler = logging.FileHandler(dated_log_file)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Reduce noise from requests library
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)

    root_logger.info(f"Logging to: {dated_log_file}")


def main():
    parser = argparse.ArgumentParser(
        description='altFINS Telegram Monitor',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_monitor.py price                      # Start price monitor
  python scripts/run_monitor.py price --threshold 250      # Custom threshold (USD)
  python scripts/run_monitor.py signal --dry-run           # Console alerts only
  python scripts/run_monitor.py signal --once              # Single tick, then exit
  python scripts/run_monitor.py signal --list-signal-keys  # Show valid signal keys
  python scripts/run_monitor.py price --test-telegram      # Test Telegram setup
        """
    )

    parser.add_argument(
        'monitor',
        choices=MONITOR_TYPES,
        help='Monitor to run'
    )

    parser.add_argument(
        '--interval',
        type=int,
        default=None,
        help='Poll interval in seconds (default: from settings)'
    )

    parser.add_argument(
        '--threshold',
        type=Decimal,
        default=None,
        help=f'Price alert threshold in USD (default: {settings.PRICE_THRESHOLD})'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Print alerts to console instead of sending to Telegram'
    )

    parser.add_argument(
        '--once',
        action='store_true',
        help='Run a single tick and exit'
    )

    parser.add_argument(
        '--test-telegram',
        action='store_true',
        help='Send a test alert to verify Telegram configuration'
    )

    parser.add_argument(
        '--list-signal-keys',
        action='store_true',
        help='List valid signal keys from the API and exit'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=settings.LOG_LEVEL,
        help=f'Log level (default: {settings.LOG_LEVEL})'
    )

    args = parser.parse_args()

    setup_logging(args.monitor, args.log_level)
    logger = logging.getLogger(__name__)

    # Test Telegram mode
    if args.test_telegram:
        print("Testing Telegram configuration...")
        try:
            success = send_test_alert(dry_run=args.dry_run)
        except ValueError as e:
            print(f"Telegram not configured: {e}")
            sys.exit(1)
        if success:
            print("Test alert sent successfully!")
            sys.exit(0)
        print("Failed to send test alert. Check your TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID.")
        sys.exit(1)

    if not settings.ALTFINS_API_KEY:
        print("\nWARNING: ALTFINS_API_KEY not set!")
        print("To set: export ALTFINS_API_KEY=your_api_key")
        sys.exit(1)

    client = AltfinsClient()

    if args.list_signal_keys:
        try:
            keys = client.get_signal_keys()
        except FetchError as e:
            print(f"Failed to fetch signal keys: {e}")
            sys.exit(1)
        for key in keys:
            print(key)
        unknown = [s for s in settings.SIGNALS if s not in keys]
        if unknown:
            print(f"\nWARNING: configured SIGNALS not recognized: {', '.join(unknown)}")
        sys.exit(0)

    notifier = TelegramNotifier.from_env(dry_run=args.dry_run)
    if notifier is None:
        print("\nWARNING: TELEGRAM_BOT_TOKEN or TELEGRAM_CHAT_ID not set!")
        print("Set environment variables or use --dry-run for console output.")
        client.close()
        sys.exit(1)

    monitor, schedule = build_monitor(
        args.monitor,
        client=client,
        notifier=notifier,
        destination=notifier.chat_id,
        threshold=args.threshold,
        interval_seconds=args.interval,
    )

    print("\n" + "=" * 60)
    print(f"ALTFINS {args.monitor.upper()} MONITOR")
    print("=" * 60)
    print(f"API:            {settings.ALTFINS_API_BASE_URL}")
    print(f"Schedule:       {schedule.describe()}")
    print(f"Dry run:        {args.dry_run}")
    print(f"Log level:      {args.log_level}")
    print("=" * 60)

    service = MonitorService(
        monitor,
        schedule,
        status_notifier=None if args.once else notifier,
    )

    try:
        if args.once:
            ok = service.run_once()
            sys.exit(0 if ok else 1)

        print("\nStarting monitor service...")
        print("Press Ctrl+C to stop\n")
        service.run()

    except KeyboardInterrupt:
        print("\n\nMonitor stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Monitor service error: {e}")
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
