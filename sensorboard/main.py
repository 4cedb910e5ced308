#!/usr/bin/env python3
"""
sensorboard entry point

    sensorboard -c config.yaml
"""

import argparse
import uvicorn

from .core.config import load_config_from
from .core.server import create_app


def main():
    parser = argparse.ArgumentParser(description="Sensor dashboard web server")
    parser.add_argument("-c", "--config", default="config.yaml",
                        help="YAML configuration file (default: config.yaml)")
    args = parser.parse_args()

    config = load_config_from(args.config)
    app = create_app(config)

    # Single worker: the databases are shared SQLite handles
    uvicorn.run(app, host=config.host, port=config.port, reload=False, access_log=False)


if __name__ == "__main__":
    main()
