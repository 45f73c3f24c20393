#!/usr/bin/env python3
"""
Ticket Printer - prints registration tickets on a serial thermal printer
"""

import atexit
import os

from ticket_printer import create_app

app = create_app()
atexit.register(app.extensions["ticket_printer"].close)


if __name__ == '__main__':
    host = os.environ.get('TICKETPRINTER_HOST', '0.0.0.0')
    port = int(os.environ.get('TICKETPRINTER_PORT', 8081))
    app.logger.info(f"Starting Ticket Printer on http://{host}:{port}")
    app.run(host=host, port=port, debug=False)
