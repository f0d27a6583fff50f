"""Run the json-updates gateway: python -m json_updates"""

import logging

import uvicorn

from json_updates.config import load_config

config = load_config()
logging.basicConfig(
    level=config.log_level.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
)
uvicorn.run("json_updates.app:create_app", host=config.host, port=config.port, factory=True)
