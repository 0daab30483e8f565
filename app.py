"""
Main entry point for the CONAND site (local development).

Production runs under gunicorn: gunicorn -c gunicorn_config.py conand:app
"""
import os
import logging
from conand import create_app

app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 3000))

    # Set FLASK_ENV=production to disable debug mode
    debug = os.environ.get('FLASK_ENV') != 'production'

    # For local development, use localhost; for production, use 0.0.0.0
    host = '127.0.0.1' if debug else '0.0.0.0'

    logging.basicConfig(level=os.environ.get('LOG_LEVEL', 'INFO').upper())
    logging.getLogger(__name__).info("Starting CONAND on http://%s:%s", host, port)
    logging.getLogger(__name__).info("Environment: %s", "Development" if debug else "Production")
    logging.getLogger(__name__).info("Content file: %s", app.config['CONTENT_FILE'])

    app.run(host=host, port=port, debug=debug)
