#!/usr/bin/env python3
"""
Entry point for running the music player control service on a desktop
session. This file lets us avoid relying on `flask run` and keeps behavior
consistent.
"""

import logging
import os


def main():
    logging.basicConfig(
        level=os.environ.get("MUSICONTROL_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # imported after logging is set up so startup discovery is logged
    from musicontrol.app import app

    # - localhost only: this drives apps on the user's desktop
    # - debug=False so we don't probe players twice through the reloader
    host = os.environ.get("MUSICONTROL_HOST", "127.0.0.1")
    port = int(os.environ.get("MUSICONTROL_PORT", "5002"))
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    main()
