"""
Command line entry point for mihari.

Initializes the modem session and forwards serving cell readings on an interval.
"""

import signal
import sys
import logging
from typing import Optional

from serial.tools import list_ports

from .config import Config, find_config
from .forwarder import Forwarder, create_forwarder
from .modem import ModemSession
from .poller import Poller
from .version import __version__
from .exceptions import MihariError, NotAttached, TransportUnavailable

logger = logging.getLogger(__name__)


def list_serial_ports() -> list[str]:
    """Return the device paths of all serial ports found."""
    return sorted(port.device for port in list_ports.comports())


class MihariCLI:
    """Runs one modem session until interrupted."""

    def __init__(self, config: Config, once: bool = False):
        """
        Initialize CLI.

        Args:
            config: Loaded configuration
            once: Poll a single time instead of looping
        """
        self.config = config
        self.once = once
        self.session: Optional[ModemSession] = None
        self.forwarder: Optional[Forwarder] = None
        self.poller: Optional[Poller] = None

    def _handle_signal(self, signum, frame):
        """Stop polling and release the serial port."""
        logger.info(f"Received signal {signum}, shutting down")
        if self.poller:
            self.poller.stop()
        if self.session:
            self.session.close()

    def _install_signal_handlers(self):
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def run(self) -> int:
        """Run the session; returns the process exit code."""
        print(f"mihari v{__version__}")
        print(f"Connecting to {self.config.serial.port} at {self.config.serial.baudrate} baud...")

        try:
            self.forwarder = create_forwarder(self.config.forwarder, url=self.config.harvest_url)
            self.session = ModemSession(
                settings=self.config.serial,
                newline=self.config.newline
            )
            self.poller = Poller(self.session, self.forwarder, self.config.interval)
            self._install_signal_handlers()

            self.session.initialize()
            self._show_modem_info()

            if self.once:
                cell_info = self.poller.run_once()
                print(cell_info.to_payload() if cell_info else "No cell info")
            else:
                self.poller.run()

        except TransportUnavailable as e:
            if self.poller and self.poller.is_stopped:
                return 0
            print(f"\nError: {e}")
            return 1
        except NotAttached as e:
            print(f"\nModem is not attached to a network: {e}")
            return 1
        except MihariError as e:
            print(f"\nError: {e}")
            return 1
        finally:
            if self.session:
                self.session.close()
            if self.forwarder:
                self.forwarder.close()

        return 0

    def _show_modem_info(self):
        """Show modem identity."""
        identity = self.session.identity
        print(f"\nModel: {identity.manufacturer} {identity.model}")
        print(f"Revision: {identity.firmware_revision}")
        print(f"IMEI: {identity.imei}")
        print(f"IMSI: {identity.imsi}")
        print(f"ICCID: {identity.iccid}")
        if self.session.rat:
            print(f"Serving cell: {self.session.state.value} {self.session.rat.value}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    import argparse

    parser = argparse.ArgumentParser(
        description="mihari - forward cellular modem serving cell telemetry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mihari -c /etc/mihari.conf
  mihari -c mihari.yml --once -v
  mihari --list-ports
        """
    )

    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Config file (default: /etc/mihari.conf)"
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Poll once and exit"
    )
    parser.add_argument(
        "--list-ports",
        action="store_true",
        help="List serial ports and exit"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args(argv)

    # Setup logging
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    else:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s %(levelname)s: %(message)s'
        )

    if args.list_ports:
        ports = list_serial_ports()
        if not ports:
            print("No serial ports found!")
            return 1
        for port in ports:
            print(port)
        return 0

    try:
        config = find_config(args.config)
    except MihariError as e:
        print(f"Error: {e}")
        return 1

    return MihariCLI(config, once=args.once).run()


if __name__ == "__main__":
    sys.exit(main())
