# run.py
# This script launches the Flask application.
# Because the project is installed in editable mode via pyproject.toml,
# Python knows where to find the 'gridsat' package without any path manipulation.

import os

from gridsat.app import app
from gridsat.constants import DEFAULT_HOST, DEFAULT_PORT

if __name__ == '__main__':
    # GRIDSAT_DEBUG=1 enables auto-reloading when package files are changed.
    app.run(host=os.environ.get('GRIDSAT_HOST', DEFAULT_HOST),
            port=int(os.environ.get('GRIDSAT_PORT', DEFAULT_PORT)),
            debug=os.environ.get('GRIDSAT_DEBUG') == '1')
