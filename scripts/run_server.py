#!/usr/bin/env python3
"""
Serve the news portal API with uvicorn
"""

import click
import uvicorn
from news_portal.utils.config import CONFIG
from news_portal.utils.logger import setup_logger


@click.command()
@click.option('--host', default=CONFIG['server']['host'], help='Bind address')
@click.option('--port', default=CONFIG['server']['port'], type=int, help='Bind port')
@click.option('--reload', is_flag=True, help='Reload on code changes (development)')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(host, port, reload, debug):
  """Run the HTTP API"""
  log_config = CONFIG['logging']
  setup_logger(
    log_file=log_config['log_file'],
    level="DEBUG" if debug else log_config['level']
  )
  # log_config=None keeps the handlers installed above
  uvicorn.run("news_portal.api.server:app", host=host, port=port, reload=reload, log_config=None)


if __name__ == "__main__":
  main()
