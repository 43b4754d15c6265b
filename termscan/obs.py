import logging, os, uuid
import structlog

LOG_LEVEL = 'INFO'
SAMPLE_RATE = 1.0


def setup_logging(level: str = LOG_LEVEL):
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso'),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
    )
    return structlog.get_logger()

log = setup_logging()

def new_request_id() -> str:
    return uuid.uuid4().hex

def should_sample(rate: float = SAMPLE_RATE) -> bool:
    return rate >= 1.0 or (os.urandom(1)[0] / 255.0 < rate)
