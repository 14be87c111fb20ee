"""
Serving cell monitoring example.

Prints the modem identity and the serving cell every few seconds.
"""

import time
from mihari import ModemSession, SerialSettings, NotAttached

# Replace with your serial port
PORT = "/dev/ttyUSB2"


def main():
    """Main function."""
    print("mihari - Serving Cell Monitor\n")

    with ModemSession(settings=SerialSettings(port=PORT)) as session:
        identity = session.identity
        print(f"Model: {identity.manufacturer} {identity.model} ({identity.firmware_revision})")
        print(f"IMEI: {identity.imei}  IMSI: {identity.imsi}  ICCID: {identity.iccid}\n")
        print("Monitoring serving cell (Ctrl+C to stop)...\n")

        try:
            while True:
                try:
                    cell_info = session.refresh_cell_info()
                except NotAttached:
                    print("Searching for a network")
                else:
                    if cell_info:
                        print(cell_info.to_payload())
                    else:
                        print(f"No details for {session.rat.value}")

                print("-" * 40)
                time.sleep(5)

        except KeyboardInterrupt:
            print("\nStopping monitor...")


if __name__ == "__main__":
    main()
