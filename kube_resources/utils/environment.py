import logging
import os

from kube_resources.utils import config

KUBE_RESOURCES_CONFIG = "KUBE_RESOURCES_CONFIG"
KUBE_RESOURCES_LOG_LEVEL = "KUBE_RESOURCES_LOG_LEVEL"

LOG_FMT = "[%(asctime)s] [%(levelname)s] [%(filename)s:%(funcName)s:%(lineno)d] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def init_env(
    log_level: str | None = None,
    config_file: str | None = None,
) -> None:
    # store env configs in environment variables. this way child processes
    # will inherit them and a compatible environment can be setup in a child
    # process easily by running `init_env()` with no parameters.
    if log_level:
        os.environ[KUBE_RESOURCES_LOG_LEVEL] = log_level
    if config_file:
        os.environ[KUBE_RESOURCES_CONFIG] = config_file

    # init loglevel
    logging.basicConfig(
        format=LOG_FMT,
        datefmt=LOG_DATEFMT,
        level=getattr(logging, os.environ.get(KUBE_RESOURCES_LOG_LEVEL) or "INFO"),
    )

    # the config file is optional, all settings have command line equivalents
    config_file = os.environ.get(KUBE_RESOURCES_CONFIG)
    if not config_file:
        logging.debug("no config file specified")
        return
    config.init_from_toml(config_file)
    logging.debug(f"loaded config from {config_file}")
