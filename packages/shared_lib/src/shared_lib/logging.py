import logging

NOISY_LOGGERS = ("httpx", "aiogram", "web3", "backoff", "urllib3")


def setup_logging(level: int | str = logging.INFO):
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
